"""
Management command to seed offboarding templates for an entity.

Creates a default "Standard Offboarding" template from the GENERAL preset
and one template per active department, using the department's preset
checklist (matched by department name).

Usage:
    python manage.py seed_offboarding_templates ACME
    python manage.py seed_offboarding_templates ACME --with-google-suspend
    python manage.py seed_offboarding_templates ACME --replace  # deactivate existing and recreate
"""

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from core.scope.models import Entity
from HR.offboarding.models import OffboardingTaskTemplate, OffboardingTemplate, Role, SystemCode
from HR.offboarding.presets import OFFBOARDING_DEPARTMENT_PRESETS, get_department_presets
from HR.work_structures.models import Department

STANDARD_TEMPLATE_NAME = 'Standard Offboarding'


class Command(BaseCommand):
    help = 'Create offboarding templates for an entity from the built-in presets'

    def add_arguments(self, parser):
        parser.add_argument('entity_code', help='Code of the entity to seed')
        parser.add_argument(
            '--with-google-suspend',
            action='store_true',
            help='Add an automated Google Workspace suspension task to every template',
        )
        parser.add_argument(
            '--replace',
            action='store_true',
            help='Deactivate the entity\'s existing templates before seeding',
        )

    def handle(self, *args, **options):
        entity = Entity.objects.filter(code=options['entity_code']).first()
        if entity is None:
            raise CommandError(f"Entity '{options['entity_code']}' does not exist")

        with transaction.atomic():
            existing = OffboardingTemplate.objects.for_scope(entity).filter(is_active=True)
            if options['replace']:
                count = existing.update(is_active=False)
                if count:
                    self.stdout.write(self.style.WARNING(f'Deactivated {count} existing template(s)'))
            elif existing.exists():
                self.stdout.write(
                    self.style.WARNING(
                        f'Entity {entity.code} already has active offboarding templates. '
                        'Use --replace to recreate.'
                    )
                )
                return

            created = [
                self._create_template(
                    entity,
                    STANDARD_TEMPLATE_NAME,
                    OFFBOARDING_DEPARTMENT_PRESETS['GENERAL'],
                    is_default=True,
                    google_suspend=options['with_google_suspend'],
                )
            ]
            for department in Department.objects.for_scope(entity).filter(is_active=True):
                created.append(
                    self._create_template(
                        entity,
                        f'{department.name} Offboarding',
                        get_department_presets(department.name),
                        department=department,
                        google_suspend=options['with_google_suspend'],
                    )
                )

        for template in created:
            self.stdout.write(
                self.style.SUCCESS(
                    f'Created template "{template.name}" (ID: {template.id}) '
                    f'with {template.task_templates.count()} tasks'
                )
            )

    def _create_template(self, entity, name, presets, department=None, is_default=False,
                         google_suspend=False):
        template = OffboardingTemplate.objects.create(
            entity=entity,
            name=name,
            department=department,
            is_default=is_default,
            description='Seeded from the built-in offboarding checklist presets',
        )
        task_templates = [
            OffboardingTaskTemplate(
                template=template,
                title=preset.title,
                assigned_role=preset.role,
                due_offset_days=preset.due_offset_days,
                order_index=index,
            )
            for index, preset in enumerate(presets)
        ]
        if google_suspend:
            task_templates.append(
                OffboardingTaskTemplate(
                    template=template,
                    title='Suspend Google Workspace account',
                    assigned_role=Role.IT,
                    due_offset_days=0,
                    system_code=SystemCode.GOOGLE_ACCOUNT_SUSPEND,
                    order_index=len(task_templates),
                )
            )
        OffboardingTaskTemplate.objects.bulk_create(task_templates)
        return template
