from starlette.datastructures import QueryParams
from starlette.types import ASGIApp, Receive, Scope, Send


class MethodOverrideMiddleware:
    """
    Let HTML forms issue PUT and DELETE requests.

    Browsers can only submit GET and POST, so a form posts to
    ``/products/1?_method=DELETE`` and this middleware rewrites the request
    method before routing. Only POST requests are rewritten, and only to one
    of the allowed methods.
    """

    def __init__(
        self,
        app: ASGIApp,
        param_name: str = "_method",
        allowed_methods: tuple = ("PUT", "PATCH", "DELETE"),
    ):
        self.app = app
        self.param_name = param_name
        self.allowed_methods = {method.upper() for method in allowed_methods}

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["method"] == "POST":
            query = QueryParams(scope.get("query_string", b""))
            override = (query.get(self.param_name) or "").upper()
            if override in self.allowed_methods:
                scope = dict(scope, method=override)

        await self.app(scope, receive, send)
