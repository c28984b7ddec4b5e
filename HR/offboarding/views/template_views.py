from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.scope.decorators import require_scope
from HR.offboarding.exceptions import NotFoundError
from HR.offboarding.serializers import OffboardingTemplateSerializer
from HR.offboarding.services import find_template
from HR.person.models import Employee


@api_view(['GET'])
@require_scope
def template_resolve(request, scope):
    """
    Best matching template for an employee.

    GET /hr/offboarding/templates/resolve/?employee_id=<id>&exit_type=<type>

    Returns null data when no template applies.
    """
    employee_id = request.query_params.get('employee_id')
    if not employee_id or not employee_id.isdigit():
        return Response({'employee_id': ['A numeric employee_id is required']}, status=status.HTTP_400_BAD_REQUEST)

    employee = Employee.objects.for_scope(scope).filter(pk=int(employee_id)).first()
    if employee is None:
        raise NotFoundError(f"Employee {employee_id} not found")

    template = find_template(scope, employee, request.query_params.get('exit_type', ''))
    data = OffboardingTemplateSerializer(template).data if template is not None else None
    return Response(data, status=status.HTTP_200_OK)
