# travel/middleware.py


class ApiClientMiddleware:
    """Closes the request's API client (and its connection pool) after the view has run."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        try:
            return self.get_response(request)
        finally:
            client = getattr(request, 'api_client', None)
            if client is not None:
                client.close()
