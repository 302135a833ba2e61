from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, List, Optional

from asgiref.sync import sync_to_async
from django.http import HttpResponse, JsonResponse
from django.utils.cache import patch_vary_headers
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from strawberry.django.views import AsyncGraphQLView, GraphQLView

from .access import AccessGate
from .context import ComposeContext, RequestState

if TYPE_CHECKING:
    from django.http import HttpRequest

CACHE_CONTEXTS_HEADER = "X-Cache-Contexts"


def vary_headers(tokens: frozenset[str]) -> List[str]:
    """Map cache contexts to the request headers a response varies by."""
    headers = []
    if any(t.startswith(("languages", "static:language")) for t in tokens):
        headers.append("Accept-Language")
    if any(t == "user" or t.startswith("user.") for t in tokens):
        headers.append("Cookie")
    return headers


class ComposeViewMixin:
    """Gate requests and expose the cache contexts they varied by.

    Forbidden requests are answered before any field gets resolved. These views
    only answer JSON, the GraphQL IDE is disabled.
    """

    gate: ClassVar[Optional[AccessGate]] = None

    def __init__(self, *args: Any, **kwargs: Any):
        kwargs.setdefault("graphql_ide", None)
        super().__init__(*args, **kwargs)

    def get_gate(self) -> AccessGate:
        return self.gate if self.gate is not None else AccessGate.from_settings()

    def forbidden_response(self, gate: AccessGate) -> HttpResponse:
        return JsonResponse({"errors": [{"message": gate.message}]}, status=403)

    def create_state(self, request: HttpRequest) -> RequestState:
        state = RequestState.from_request(request)
        request.compose_state = state  # type: ignore[attr-defined]
        return state

    def finalize_response(self, request: HttpRequest, response: HttpResponse) -> HttpResponse:
        state: Optional[RequestState] = getattr(request, "compose_state", None)
        if state is None:
            return response

        tokens = state.cache_contexts.merge()
        if tokens:
            response[CACHE_CONTEXTS_HEADER] = " ".join(sorted(tokens))
            patch_vary_headers(response, vary_headers(tokens))

        return response


class ComposeGraphQLView(ComposeViewMixin, GraphQLView):
    def get_context(self, request: HttpRequest, response: HttpResponse) -> ComposeContext:
        return ComposeContext(
            request=request,
            response=response,
            state=self.create_state(request),
        )

    @method_decorator(csrf_exempt)
    def dispatch(self, request: HttpRequest, *args: Any, **kwargs: Any):
        gate = self.get_gate()
        if not gate.check(getattr(request, "user", None), request.headers):
            return self.forbidden_response(gate)

        response = super().dispatch(request, *args, **kwargs)
        return self.finalize_response(request, response)


class AsyncComposeGraphQLView(ComposeViewMixin, AsyncGraphQLView):
    async def get_context(
        self,
        request: HttpRequest,
        response: HttpResponse,
    ) -> ComposeContext:
        return ComposeContext(
            request=request,
            response=response,
            state=self.create_state(request),
        )

    @method_decorator(csrf_exempt)
    async def dispatch(self, request: HttpRequest, *args: Any, **kwargs: Any):
        gate = self.get_gate()
        allowed = await sync_to_async(gate.check)(
            getattr(request, "user", None),
            request.headers,
        )
        if not allowed:
            return self.forbidden_response(gate)

        response = await super().dispatch(request, *args, **kwargs)
        return self.finalize_response(request, response)
