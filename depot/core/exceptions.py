class BusinessRuleError(Exception):
    """Raised by service functions when a business rule refuses an operation"""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field

    def as_response_data(self):
        data = {'error': self.message}
        if self.field:
            data['field'] = self.field
        return data
