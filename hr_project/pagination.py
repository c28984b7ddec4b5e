"""
Pagination for function-based list views.

List endpoints return a plain list; ``auto_paginate`` turns it into the
standard envelope with a page of results:

{
    "status": "success",
    "message": "",
    "data": {"count": ..., "next": ..., "previous": ..., "results": [...]}
}
"""
from functools import wraps

from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsSetPagination(PageNumberPagination):
    """page / page_size query parameters, 20 per page by default, 100 at most."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100

    def get_paginated_response(self, data):
        return Response({
            'status': 'success',
            'message': '',
            'data': {
                'count': self.page.paginator.count,
                'next': self.get_next_link(),
                'previous': self.get_previous_link(),
                'results': data
            }
        })


def auto_paginate(view_func):
    """
    Paginate GET responses whose data is a list; anything else passes through.

    Usage:
        @api_view(['GET', 'POST'])
        @auto_paginate
        def run_list(request):
            ...
    """
    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        response = view_func(request, *args, **kwargs)

        if (
            request.method == 'GET' and
            isinstance(response, Response) and
            isinstance(response.data, list)
        ):
            paginator = StandardResultsSetPagination()
            page = paginator.paginate_queryset(response.data, request)
            if page is not None:
                return paginator.get_paginated_response(page)

        return response

    return wrapper
