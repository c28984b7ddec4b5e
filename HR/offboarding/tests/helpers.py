from core.base.test_utils import create_employee, create_entity
from HR.offboarding.models import OffboardingTaskTemplate, OffboardingTemplate


def create_template(entity=None, name='Standard Offboarding', tasks=(), **kwargs):
    """
    Template with task templates. Each task is a dict of
    OffboardingTaskTemplate fields; order_index defaults to list position.
    """
    template = OffboardingTemplate.objects.create(entity=entity, name=name, **kwargs)
    for index, task in enumerate(tasks):
        task = dict(task)
        task.setdefault('order_index', index)
        OffboardingTaskTemplate.objects.create(template=template, **task)
    return template


class OffboardingFixtureMixin:
    """Entity, manager and departing employee shared by the service tests."""

    def create_people(self):
        self.entity = create_entity(code='ACME', name='Acme Pty Ltd')
        self.other_entity = create_entity(code='GLOBEX', name='Globex')
        self.manager = create_employee(self.entity, first_name='Mary', last_name='Manager')
        self.employee = create_employee(
            self.entity, first_name='Jane', last_name='Doe', manager=self.manager
        )
