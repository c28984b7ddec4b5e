from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.scope.decorators import require_scope
from HR.offboarding.serializers import (
    OffboardingRunSerializer,
    OffboardingTaskSerializer,
    TaskBlockSerializer,
    TaskUpdateSerializer,
)
from HR.offboarding.services import TaskService


@api_view(['GET', 'PATCH'])
@require_scope
def task_detail(request, pk, scope):
    """
    GET   /hr/offboarding/tasks/<pk>/
    PATCH /hr/offboarding/tasks/<pk>/ - change due_date / assigned_employee_id
    """
    if request.method == 'GET':
        task = TaskService.get_task(scope, pk)
        return Response(OffboardingTaskSerializer(task).data, status=status.HTTP_200_OK)

    serializer = TaskUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    task = TaskService.update(scope, pk, serializer.to_dto())
    return Response(OffboardingTaskSerializer(task).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@require_scope
def task_complete(request, pk, scope):
    """
    Complete a task. The response carries the automated action result
    and whether the run was closed.
    """
    result = TaskService.complete(scope, pk)
    data = result.as_dict()
    data['task'] = OffboardingTaskSerializer(result.task).data
    data['run'] = OffboardingRunSerializer(result.run).data
    return Response(data, status=status.HTTP_200_OK)


@api_view(['POST'])
@require_scope
def task_start(request, pk, scope):
    task = TaskService.start(scope, pk)
    return Response(OffboardingTaskSerializer(task).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@require_scope
def task_block(request, pk, scope):
    serializer = TaskBlockSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    task = TaskService.block(scope, pk, serializer.validated_data['reason'])
    return Response(OffboardingTaskSerializer(task).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@require_scope
def task_unblock(request, pk, scope):
    task = TaskService.unblock(scope, pk)
    return Response(OffboardingTaskSerializer(task).data, status=status.HTTP_200_OK)
