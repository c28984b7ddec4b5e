import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('scope', '0001_initial'),
        ('person', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='DocumentTemplate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last modified')),
                ('name', models.CharField(max_length=200)),
                ('file_url', models.URLField(max_length=500)),
                ('file_name', models.CharField(max_length=255)),
                ('file_size_bytes', models.PositiveIntegerField(blank=True, null=True)),
                ('file_mime_type', models.CharField(blank=True, max_length=100)),
                ('is_active', models.BooleanField(default=True)),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='documents_documenttemplate_created', to=settings.AUTH_USER_MODEL)),
                ('entity', models.ForeignKey(blank=True, help_text='Entity (tenant scope) this record belongs to', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='documents_documenttemplate_set', to='scope.entity')),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='documents_documenttemplate_updated', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'hr_document_template',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Document',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('related_offboarding_id', models.BigIntegerField(blank=True, db_index=True, null=True)),
                ('related_offboarding_task_id', models.BigIntegerField(blank=True, null=True)),
                ('file_url', models.URLField(max_length=500)),
                ('file_name', models.CharField(max_length=255)),
                ('file_size', models.PositiveIntegerField(blank=True, null=True)),
                ('file_type', models.CharField(blank=True, max_length=100)),
                ('category', models.CharField(blank=True, max_length=60)),
                ('visibility', models.CharField(choices=[('admin', 'Admin only'), ('manager', 'Admin and manager'), ('employee', 'Employee')], default='admin', max_length=20)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('entity', models.ForeignKey(blank=True, help_text='Entity (tenant scope) this record belongs to', null=True, on_delete=django.db.models.deletion.PROTECT, related_name='documents_document_set', to='scope.entity')),
                ('owner_employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='documents', to='person.employee')),
                ('source_template', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='generated_documents', to='documents.documenttemplate')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='uploaded_hr_documents', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'hr_document',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
