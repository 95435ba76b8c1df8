#!/usr/bin/env python
"""
Test runner script for the full suite
Usage: python Doc/run_tests.py (from the repository root)
"""
import os
import sys
import django
from django.conf import settings
from django.test.utils import get_runner

if __name__ == "__main__":
    sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'depot.config.settings')
    django.setup()
    TestRunner = get_runner(settings)
    test_runner = TestRunner()
    failures = test_runner.run_tests([
        'depot.core',
        'depot.notifications',
        'depot.parties',
        'depot.catalog',
        'depot.locations',
        'depot.orders',
        'depot.delivery',
        'depot.purchasing',
        'depot.inventory',
        'depot.equipment',
        'depot.visitors',
    ])
    sys.exit(bool(failures))
