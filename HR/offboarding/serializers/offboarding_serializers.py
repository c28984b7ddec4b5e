"""
Serializers for offboarding runs, tasks and templates
"""
from rest_framework import serializers

from HR.offboarding.dtos import ExitInterviewDTO, ManualTaskCreateDTO, OffboardingCreateDTO, TaskUpdateDTO
from HR.offboarding.models import (
    EmployeeOffboarding,
    EmployeeOffboardingTask,
    OffboardingTaskTemplate,
    OffboardingTemplate,
    Role,
)


class OffboardingTaskSerializer(serializers.ModelSerializer):
    """Read serializer for task instances"""
    assigned_employee_name = serializers.CharField(source='assigned_employee.full_name', read_only=True, default=None)

    class Meta:
        model = EmployeeOffboardingTask
        fields = [
            'id', 'offboarding', 'task_template', 'title', 'description', 'category',
            'assigned_role', 'assigned_employee', 'assigned_employee_name',
            'due_date', 'required', 'link_url', 'system_code', 'order_index',
            'status', 'blocked_reason', 'completed_at', 'created_at'
        ]
        read_only_fields = fields


class OffboardingRunSerializer(serializers.ModelSerializer):
    """Read serializer for runs (list view)"""
    employee_name = serializers.CharField(source='employee.full_name', read_only=True)
    department_name = serializers.CharField(source='department.name', read_only=True, default=None)
    manager_name = serializers.CharField(source='manager.full_name', read_only=True, default=None)
    template_name = serializers.CharField(source='template.name', read_only=True, default=None)
    exit_interview_missing = serializers.BooleanField(read_only=True)

    class Meta:
        model = EmployeeOffboarding
        fields = [
            'id', 'entity', 'employee', 'employee_name', 'template', 'template_name',
            'department', 'department_name', 'manager', 'manager_name',
            'last_day', 'exit_type', 'reason', 'status',
            'created_at', 'completed_at', 'cancelled_at', 'created_by',
            'exit_interview_notes', 'exit_interview_rating', 'exit_interview_completed_at',
            'exit_interview_missing'
        ]
        read_only_fields = fields


class OffboardingRunDetailSerializer(OffboardingRunSerializer):
    """Run with its tasks; progress is supplied through the context"""
    tasks = serializers.SerializerMethodField()
    progress = serializers.SerializerMethodField()

    class Meta(OffboardingRunSerializer.Meta):
        fields = OffboardingRunSerializer.Meta.fields + ['tasks', 'progress']
        read_only_fields = fields

    def get_tasks(self, obj):
        tasks = obj.tasks.filter(entity_id=obj.entity_id).order_by('order_index', 'id')
        return OffboardingTaskSerializer(tasks, many=True).data

    def get_progress(self, obj):
        progress = self.context.get('progress')
        return progress.as_dict() if progress is not None else None


class OffboardingCreateSerializer(serializers.Serializer):
    """Write serializer for starting an offboarding run"""
    employee_id = serializers.IntegerField()
    template_id = serializers.IntegerField(required=False, allow_null=True)
    last_day = serializers.CharField()
    exit_type = serializers.CharField(required=False, allow_blank=True, default='')
    reason = serializers.CharField(required=False, allow_blank=True, default='')
    idempotency_key = serializers.CharField(required=False, allow_null=True, allow_blank=True, max_length=100)

    def to_dto(self):
        return OffboardingCreateDTO(**self.validated_data)


class TaskUpdateSerializer(serializers.Serializer):
    """Write serializer for editing due date / assignee"""
    due_date = serializers.DateField(required=False, allow_null=True)
    assigned_employee_id = serializers.IntegerField(required=False, allow_null=True)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide due_date and/or assigned_employee_id")
        return attrs

    def to_dto(self):
        data = self.validated_data
        return TaskUpdateDTO(
            due_date=data.get('due_date'),
            assigned_employee_id=data.get('assigned_employee_id'),
            clear_due_date='due_date' in data and data['due_date'] is None,
            clear_assigned_employee='assigned_employee_id' in data and data['assigned_employee_id'] is None,
        )


class TaskBlockSerializer(serializers.Serializer):
    reason = serializers.CharField()


class ManualTaskCreateSerializer(serializers.Serializer):
    """Write serializer for adding a manual task to a run"""
    title = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    category = serializers.CharField(required=False, allow_blank=True, default='')
    assigned_role = serializers.ChoiceField(choices=Role.choices, required=False, default=Role.HR)
    assigned_employee_id = serializers.IntegerField(required=False, allow_null=True)
    due_date = serializers.DateField(required=False, allow_null=True)
    required = serializers.BooleanField(required=False, default=True)
    link_url = serializers.CharField(required=False, allow_blank=True, default='')

    def to_dto(self):
        return ManualTaskCreateDTO(**self.validated_data)


class ExitInterviewSerializer(serializers.Serializer):
    """Write serializer for the exit interview of a run"""
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    rating = serializers.IntegerField(required=False, allow_null=True, min_value=1, max_value=5)
    completed_at = serializers.CharField(required=False, allow_null=True, allow_blank=True)

    def to_dto(self):
        return ExitInterviewDTO(**self.validated_data)


class OffboardingTaskTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = OffboardingTaskTemplate
        fields = [
            'id', 'title', 'description', 'category', 'assigned_role', 'required',
            'order_index', 'due_offset_days', 'system_code', 'link_url'
        ]


class OffboardingTemplateSerializer(serializers.ModelSerializer):
    """Read serializer for templates with their task templates"""
    task_templates = OffboardingTaskTemplateSerializer(many=True, read_only=True)

    class Meta:
        model = OffboardingTemplate
        fields = [
            'id', 'entity', 'name', 'description', 'department', 'employment_type',
            'exit_type', 'is_default', 'is_active', 'termination_template',
            'exit_document_templates', 'task_templates'
        ]
        read_only_fields = fields
