from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand
from depot.catalog.models import ProductAttribute, ProductCategory, PACKAGE_DIMENSION_ATTRIBUTES
from depot.core.roles import ROLE_DESCRIPTIONS, ROLE_EMPLOYEE_ADMIN, assign_role, get_employees_by_role


class Command(BaseCommand):
    help = ('Create the role groups (ROLE_EMPLOYEE_* and ROLE_VISITOR), the first administrator '
            'and the package dimension attributes')

    def add_arguments(self, parser):
        parser.add_argument('--admin-username', default='admin', help='Username of the default administrator')
        parser.add_argument('--admin-password', default='admin', help='Password of the default administrator')

    def handle(self, *args, **options):
        created_count = 0
        existing_count = 0

        for name, description in ROLE_DESCRIPTIONS.items():
            group, created = Group.objects.get_or_create(name=name)
            if created:
                self.stdout.write(self.style.SUCCESS(f'✓ Created group: {name} ({description})'))
                created_count += 1
            else:
                self.stdout.write(f'  Group already exists: {name}')
                existing_count += 1

        self.create_admin(options['admin_username'], options['admin_password'])
        self.create_dimension_attributes()

        self.stdout.write(self.style.SUCCESS(
            f'\nCompleted: {created_count} groups created, {existing_count} groups already existed'
        ))

    def create_admin(self, username, password):
        if get_employees_by_role(ROLE_EMPLOYEE_ADMIN).exists():
            self.stdout.write('  An administrator already exists')
            return
        User = get_user_model()
        user, created = User.objects.get_or_create(username=username, defaults={'is_staff': True})
        if created:
            user.set_password(password)
            user.need_change_pass = True
            user.save()
            self.stdout.write(self.style.SUCCESS(f'✓ Created administrator: {username}'))
        assign_role(user, ROLE_EMPLOYEE_ADMIN)

    def create_dimension_attributes(self):
        attributes = []
        for name in PACKAGE_DIMENSION_ATTRIBUTES:
            attribute, created = ProductAttribute.objects.get_or_create(
                name=name, defaults={'unit': 'cm', 'data_type': ProductAttribute.TYPE_NUMBER}
            )
            if created:
                self.stdout.write(self.style.SUCCESS(f'✓ Created attribute: {name}'))
            attributes.append(attribute)
        for category in ProductCategory.objects.all():
            category.attributes.add(*attributes)
