from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.scope.decorators import require_scope
from hr_project.pagination import auto_paginate
from HR.offboarding.dtos import RunFilterDTO
from HR.offboarding.serializers import (
    ExitInterviewSerializer,
    ManualTaskCreateSerializer,
    OffboardingCreateSerializer,
    OffboardingRunDetailSerializer,
    OffboardingRunSerializer,
    OffboardingTaskSerializer,
)
from HR.offboarding.services import OffboardingService, RunService, TaskService


def _int_param(request, name):
    value = request.query_params.get(name)
    try:
        return int(value) if value else None
    except (TypeError, ValueError):
        return None


def _detail(scope, run):
    progress = RunService.get_progress(scope, run.pk)
    return OffboardingRunDetailSerializer(run, context={'progress': progress}).data


@api_view(['GET', 'POST'])
@require_scope
@auto_paginate
def run_list(request, scope):
    """
    List offboarding runs or start a new one.

    GET /hr/offboarding/runs/
    - Filters: view (pipeline|history|all), status, exit_type, manager_id,
      department_id, employee_id, search

    POST /hr/offboarding/runs/
    - Start offboarding for an employee
    - existing_active_runs lists the employee's other open runs so the
      client can warn about a duplicate
    """
    if request.method == 'GET':
        filters = RunFilterDTO(
            view=request.query_params.get('view', 'pipeline'),
            status=request.query_params.get('status'),
            exit_type=request.query_params.get('exit_type'),
            manager_id=_int_param(request, 'manager_id'),
            department_id=_int_param(request, 'department_id'),
            employee_id=_int_param(request, 'employee_id'),
            search=request.query_params.get('search'),
        )
        runs = RunService.list_runs(scope, filters)
        serializer = OffboardingRunSerializer(runs, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = OffboardingCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    run = OffboardingService.create(scope, serializer.to_dto())
    data = _detail(scope, run)
    others = RunService.active_runs_for(scope, run.employee_id, exclude_run_id=run.pk)
    data['existing_active_runs'] = OffboardingRunSerializer(others, many=True).data
    return Response(data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@require_scope
def run_detail(request, pk, scope):
    """Run with its tasks and progress."""
    run = RunService.get_run(scope, pk)
    return Response(_detail(scope, run), status=status.HTTP_200_OK)


@api_view(['POST'])
@require_scope
def run_pause(request, pk, scope):
    run = RunService.pause(scope, pk)
    return Response(OffboardingRunSerializer(run).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@require_scope
def run_start(request, pk, scope):
    run = RunService.start(scope, pk)
    return Response(OffboardingRunSerializer(run).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@require_scope
def run_cancel(request, pk, scope):
    """Cancel a run; the employee returns to active."""
    run = RunService.cancel(scope, pk, reason=request.data.get('reason', ''))
    return Response(OffboardingRunSerializer(run).data, status=status.HTTP_200_OK)


@api_view(['POST'])
@require_scope
def run_force_complete(request, pk, scope):
    run = RunService.force_complete(scope, pk)
    return Response(_detail(scope, run), status=status.HTTP_200_OK)


@api_view(['POST'])
@require_scope
def run_exit_interview(request, pk, scope):
    """
    Record the exit interview of a run.

    POST /hr/offboarding/runs/{id}/exit-interview/
    - Request body: { "notes", "rating" (1-5), "completed_at" (YYYY-MM-DD) }
    """
    serializer = ExitInterviewSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    run = RunService.record_exit_interview(scope, pk, serializer.to_dto())
    return Response(OffboardingRunSerializer(run).data, status=status.HTTP_200_OK)


@api_view(['GET'])
@require_scope
def run_progress(request, pk, scope):
    progress = RunService.get_progress(scope, pk)
    return Response(progress.as_dict(), status=status.HTTP_200_OK)


@api_view(['GET'])
@require_scope
def run_tasks_by_role(request, pk, scope):
    groups = TaskService.tasks_by_role(scope, pk)
    data = {
        role: OffboardingTaskSerializer(tasks, many=True).data
        for role, tasks in groups.items()
    }
    return Response(data, status=status.HTTP_200_OK)


@api_view(['POST'])
@require_scope
def run_add_task(request, pk, scope):
    """Add a manual task to an open run."""
    serializer = ManualTaskCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    task = TaskService.add_task(scope, pk, serializer.to_dto())
    return Response(OffboardingTaskSerializer(task).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@require_scope
def offboarding_stats(request, scope):
    stats = RunService.get_stats(scope)
    return Response({
        'active': stats.active,
        'completed_this_month': stats.completed_this_month,
        'cancelled_this_month': stats.cancelled_this_month,
        'average_completion_days': stats.average_completion_days,
        'by_status': stats.by_status,
    }, status=status.HTTP_200_OK)
