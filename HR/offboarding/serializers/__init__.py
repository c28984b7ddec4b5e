from .offboarding_serializers import (
    OffboardingTaskSerializer,
    OffboardingRunSerializer,
    OffboardingRunDetailSerializer,
    OffboardingCreateSerializer,
    TaskUpdateSerializer,
    TaskBlockSerializer,
    ManualTaskCreateSerializer,
    ExitInterviewSerializer,
    OffboardingTemplateSerializer,
)

__all__ = [
    'OffboardingTaskSerializer',
    'OffboardingRunSerializer',
    'OffboardingRunDetailSerializer',
    'OffboardingCreateSerializer',
    'TaskUpdateSerializer',
    'TaskBlockSerializer',
    'ManualTaskCreateSerializer',
    'ExitInterviewSerializer',
    'OffboardingTemplateSerializer',
]
