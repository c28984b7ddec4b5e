import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('offboarding', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='employeeoffboarding',
            name='exit_interview_notes',
            field=models.TextField(blank=True),
        ),
        migrations.AddField(
            model_name='employeeoffboarding',
            name='exit_interview_rating',
            field=models.PositiveSmallIntegerField(blank=True, help_text='1 (poor) to 5 (excellent)', null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)]),
        ),
        migrations.AddField(
            model_name='employeeoffboarding',
            name='exit_interview_completed_at',
            field=models.DateTimeField(blank=True, null=True),
        ),
    ]
