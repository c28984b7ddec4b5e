import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('scope', '0001_initial'),
        ('work_structures', '0001_initial'),
        ('person', '0001_initial'),
        ('documents', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='OffboardingTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last modified')),
                ('name', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('employment_type', models.CharField(blank=True, choices=[('full_time', 'Full-time'), ('part_time', 'Part-time'), ('contractor', 'Contractor'), ('casual', 'Casual'), ('intern', 'Intern')], help_text='Blank matches any employment type', max_length=20)),
                ('exit_type', models.CharField(blank=True, help_text='e.g. voluntary, involuntary, redundancy; blank matches any', max_length=50)),
                ('is_default', models.BooleanField(default=False)),
                ('is_active', models.BooleanField(default=True)),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='offboarding_offboardingtemplate_created', to=settings.AUTH_USER_MODEL)),
                ('department', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='offboarding_templates', to='work_structures.department')),
                ('entity', models.ForeignKey(blank=True, help_text='Entity (tenant scope) this record belongs to', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='offboarding_offboardingtemplate_set', to='scope.entity')),
                ('exit_document_templates', models.ManyToManyField(blank=True, related_name='+', to='documents.documenttemplate')),
                ('termination_template', models.ForeignKey(blank=True, help_text='Termination letter generated when a run starts', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='documents.documenttemplate')),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='offboarding_offboardingtemplate_updated', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'offboarding_template',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='OffboardingTaskTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(blank=True, max_length=60)),
                ('assigned_role', models.CharField(default='hr', help_text='employee, manager, hr, it or finance', max_length=20)),
                ('required', models.BooleanField(default=True)),
                ('order_index', models.IntegerField(default=0)),
                ('due_offset_days', models.IntegerField(blank=True, help_text='Days relative to the last day (negative = before)', null=True)),
                ('system_code', models.CharField(blank=True, help_text='Automated action run on completion; blank for manual tasks', max_length=50)),
                ('link_url', models.CharField(blank=True, max_length=500)),
                ('template', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='task_templates', to='offboarding.offboardingtemplate')),
            ],
            options={
                'db_table': 'offboarding_task_template',
                'ordering': ['order_index', 'id'],
            },
        ),
        migrations.CreateModel(
            name='EmployeeOffboarding',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('last_day', models.DateField()),
                ('exit_type', models.CharField(blank=True, max_length=50)),
                ('reason', models.TextField(blank=True)),
                ('status', models.CharField(choices=[('draft', 'Draft'), ('scheduled', 'Scheduled'), ('in_progress', 'In Progress'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], db_index=True, default='scheduled', max_length=20)),
                ('idempotency_key', models.CharField(blank=True, help_text='Client supplied key; repeating a create with the same key returns the existing run', max_length=100, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('cancelled_at', models.DateTimeField(blank=True, null=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_offboardings', to=settings.AUTH_USER_MODEL)),
                ('department', models.ForeignKey(blank=True, help_text="Employee's department when the run started", null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='work_structures.department')),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='offboardings', to='person.employee')),
                ('entity', models.ForeignKey(blank=True, help_text='Entity (tenant scope) this record belongs to', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='offboarding_employeeoffboarding_set', to='scope.entity')),
                ('manager', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='managed_offboardings', to='person.employee')),
                ('template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='runs', to='offboarding.offboardingtemplate')),
            ],
            options={
                'db_table': 'employee_offboarding',
                'ordering': ['-created_at', '-id'],
                'indexes': [models.Index(fields=['entity', 'status'], name='offboarding_entity_status_idx')],
                'constraints': [models.UniqueConstraint(fields=('entity', 'idempotency_key'), name='unique_offboarding_idempotency_key_per_entity')],
            },
        ),
        migrations.CreateModel(
            name='EmployeeOffboardingTask',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('category', models.CharField(blank=True, max_length=60)),
                ('assigned_role', models.CharField(choices=[('employee', 'Employee'), ('manager', 'Manager'), ('hr', 'HR'), ('it', 'IT'), ('finance', 'Finance')], default='hr', max_length=20)),
                ('due_date', models.DateField(blank=True, null=True)),
                ('required', models.BooleanField(default=True)),
                ('link_url', models.CharField(blank=True, max_length=500)),
                ('system_code', models.CharField(blank=True, max_length=50)),
                ('order_index', models.IntegerField(default=0)),
                ('status', models.CharField(choices=[('not_started', 'Not Started'), ('in_progress', 'In Progress'), ('blocked', 'Blocked'), ('completed', 'Completed')], default='not_started', max_length=20)),
                ('blocked_reason', models.TextField(blank=True, null=True)),
                ('completed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('assigned_employee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='assigned_offboarding_tasks', to='person.employee')),
                ('entity', models.ForeignKey(blank=True, help_text='Entity (tenant scope) this record belongs to', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='offboarding_employeeoffboardingtask_set', to='scope.entity')),
                ('offboarding', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tasks', to='offboarding.employeeoffboarding')),
                ('task_template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='instances', to='offboarding.offboardingtasktemplate')),
            ],
            options={
                'db_table': 'employee_offboarding_task',
                'ordering': ['order_index', 'id'],
                'indexes': [models.Index(fields=['offboarding', 'required', 'status'], name='offboarding_task_progress_idx')],
            },
        ),
    ]
