import itertools
from types import SimpleNamespace

import pytest
from django.test import RequestFactory

from strawberry_compose.context import (
    LANGUAGE_INTERFACE,
    USER,
    CacheContexts,
    ComposeContext,
    FieldContext,
    RequestState,
    ensure_request_state,
    get_request_state,
    static_language,
)
from tests.utils import FakeUser, make_field_context

TOKENS = ["user", "languages:language_interface", "static:language:de", "user"]


@pytest.mark.parametrize("order", list(itertools.permutations(range(len(TOKENS)))))
def test_cache_contexts_merge_is_order_independent(order):
    contexts = CacheContexts()
    for i in order:
        contexts.append(TOKENS[i])

    assert contexts.merge() == frozenset(TOKENS)


def test_cache_contexts_update_is_associative():
    a, b, c = CacheContexts(["user"]), CacheContexts(["url"]), CacheContexts(["user", "route"])

    left = CacheContexts()
    left.update(a)
    left.update(b)
    left.update(c)

    bc = CacheContexts()
    bc.update(b)
    bc.update(c)
    right = CacheContexts()
    right.update(a)
    right.update(bc)

    assert left.merge() == right.merge() == frozenset({"user", "url", "route"})


def test_cache_contexts_only_grow():
    contexts = CacheContexts(["user"])
    before = contexts.merge()
    contexts.append()
    contexts.append("user", "url")

    assert before <= contexts.merge()
    assert len(contexts) == 2
    assert "url" in contexts
    assert "route" not in contexts


def test_static_language():
    assert static_language("de") == "static:language:de"


def test_field_context_values_propagate_to_descendants():
    state = RequestState(language="en")
    parent = FieldContext(state, ("globalConfig",))
    parent.set_context_value("language", "de")

    assert parent.get_context_value("language") == "de"
    assert FieldContext(state, ("globalConfig", "footer", 0, "title")).get_context_value(
        "language",
    ) == "de"
    assert FieldContext(state, ("node",)).get_context_value("language") == "en"
    assert FieldContext(state, ()).get_context_value("language") == "en"


def test_field_context_closest_value_wins():
    state = RequestState(language="en")
    FieldContext(state, ("a",)).set_context_value("language", "de")
    FieldContext(state, ("a", "b")).set_context_value("language", "fr")

    assert FieldContext(state, ("a", "b", "c")).get_context_value("language") == "fr"
    assert FieldContext(state, ("a", "x")).get_context_value("language") == "de"


def test_field_context_default():
    ctx = make_field_context("a", language=None)

    assert ctx.get_context_value("language", "xx") == "xx"
    assert ctx.get_context_value("unknown") is None


def test_field_context_cache_contexts_go_to_the_request():
    state = RequestState()
    make_field_context("a", state=state).add_cache_contexts([USER])
    make_field_context("b", state=state).add_cacheable_dependency(
        SimpleNamespace(cache_contexts=frozenset({LANGUAGE_INTERFACE})),
    )
    make_field_context("c", state=state).add_cacheable_dependency(object())

    assert state.cache_contexts.merge() == frozenset({USER, LANGUAGE_INTERFACE})


def test_request_state_from_request(rf: RequestFactory):
    request = rf.post("/graphql/", HTTP_X_GRAPHQL_TOKEN="s3cr3t")
    request.LANGUAGE_CODE = "de"
    request.user = FakeUser()

    state = RequestState.from_request(request)

    assert state.language == "de"
    assert state.user is request.user
    assert state.headers["x-graphql-token"] == "s3cr3t"
    assert len(state.cache_contexts) == 0


def test_request_state_without_request(settings):
    settings.LANGUAGE_CODE = "fr"
    state = RequestState.from_request(None)

    assert state.language
    assert state.user is None
    assert state.headers == {}


def test_get_request_state_from_context(rf):
    state = RequestState(language="de")
    request = rf.get("/")

    assert get_request_state(ComposeContext(request=request, response=None, state=state)) is state  # type: ignore[arg-type]
    assert get_request_state({"request": request, "state": state}) is state

    created = get_request_state({"request": request})
    assert isinstance(created, RequestState)
    assert created is not state


def test_ensure_request_state_binds_once(rf):
    execution_context = SimpleNamespace(context={"request": rf.get("/")})

    first = ensure_request_state(execution_context)
    second = ensure_request_state(execution_context)

    assert first is second
    assert execution_context.compose_state is first
