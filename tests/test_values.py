import functools
import uuid

import pytest

from wintergreen import Deferred, InvalidDeferredAttribute, Lazy, Scope, SequenceCounter, defer, fake, lazy, seq


class TestScope:
    def test_attribute_access(self) -> None:
        scope = Scope({"name": "Ada"})
        assert scope.name == "Ada"

    def test_item_access(self) -> None:
        scope = Scope({"name": "Ada"})
        assert scope["name"] == "Ada"

    def test_missing_field_raises_attribute_error(self) -> None:
        scope = Scope({})
        with pytest.raises(AttributeError, match='Field "name" not yet resolved or does not exist.'):
            scope.name

    def test_missing_field_raises_key_error(self) -> None:
        scope = Scope({})
        with pytest.raises(KeyError, match="not yet resolved"):
            scope["name"]

    def test_pending_deferred_is_hidden(self) -> None:
        scope = Scope({"total": defer(lambda r: 1)})
        with pytest.raises(AttributeError, match='Field "total" not yet resolved'):
            scope.total
        assert "total" not in scope

    def test_pending_function_is_hidden(self) -> None:
        scope = Scope({"total": lambda: 1, "lazy_total": lazy(lambda: 1)})
        assert "total" not in scope
        assert "lazy_total" not in scope

    def test_unevaluated_fields_are_hidden(self) -> None:
        scope = Scope({"child": {"x": 1}, "x": 2}, {"child"})
        assert scope.x == 2
        assert "child" not in scope
        with pytest.raises(AttributeError, match='Field "child" not yet resolved'):
            scope.child

    def test_field_named_like_a_method(self) -> None:
        scope = Scope({"get": 1, "keys": 2})
        assert scope.get == 1
        assert scope.keys == 2

    def test_sees_later_changes(self) -> None:
        data: dict[str, object] = {"total": defer(lambda r: 1)}
        scope = Scope(data)
        data["total"] = 10
        assert scope.total == 10
        assert "total" in scope


class TestLazy:
    def test_passes_scope_to_one_argument_function(self) -> None:
        value = Lazy(lambda scope: scope.x * 2)
        assert value.resolve(Scope({"x": 3})) == 6

    def test_calls_zero_argument_function_without_scope(self) -> None:
        value = Lazy(lambda: "ok")
        assert value.resolve(Scope({})) == "ok"

    def test_calls_builtin_without_scope(self) -> None:
        value = Lazy(uuid.uuid4)
        assert isinstance(value.resolve(Scope({})), uuid.UUID)

    def test_partial(self) -> None:
        value = Lazy(functools.partial(lambda prefix, scope: f"{prefix}-{scope.id}", "user"))
        assert value.resolve(Scope({"id": 7})) == "user-7"

    def test_rejects_function_with_two_required_arguments(self) -> None:
        with pytest.raises(TypeError, match="zero or one positional argument"):
            Lazy(lambda a, b: a)

    def test_rejects_non_callable(self) -> None:
        with pytest.raises(TypeError, match="must wrap a callable"):
            Lazy(42)  # type: ignore[arg-type]

    def test_lazy_helper(self) -> None:
        assert isinstance(lazy(lambda: 1), Lazy)


class TestDeferred:
    def test_default_weight_is_zero(self) -> None:
        assert defer(lambda r: 1).weight == 0

    def test_resolve_calls_compute_with_scope(self) -> None:
        deferred = defer(lambda r: r.a + 1, weight=3)
        assert deferred.weight == 3
        assert deferred.resolve(Scope({"a": 1})) == 2

    def test_negative_and_float_weights_are_valid(self) -> None:
        assert defer(lambda r: 1, weight=-2).weight == -2
        assert defer(lambda r: 1, weight=0.5).weight == 0.5

    def test_is_immutable(self) -> None:
        deferred = defer(lambda r: 1)
        with pytest.raises(AttributeError):
            deferred.weight = 5  # type: ignore[misc]

    @pytest.mark.parametrize("weight", ["1", None, True, float("nan")])
    def test_rejects_non_numeric_weight(self, weight: object) -> None:
        with pytest.raises(InvalidDeferredAttribute, match="weight"):
            Deferred(lambda r: 1, weight)  # type: ignore[arg-type]

    def test_rejects_zero_argument_compute(self) -> None:
        with pytest.raises(InvalidDeferredAttribute, match="exactly one argument"):
            defer(lambda: 1)  # type: ignore[arg-type]

    def test_rejects_two_argument_compute(self) -> None:
        with pytest.raises(InvalidDeferredAttribute, match="exactly one argument"):
            defer(lambda a, b: 1)  # type: ignore[arg-type]

    @pytest.mark.parametrize(
        "compute",
        [
            lambda r, extra=None: 1,
            lambda *records: 1,
            lambda r, *, extra=None: 1,
            lambda **kwargs: 1,
        ],
    )
    def test_rejects_extra_parameters(self, compute: object) -> None:
        with pytest.raises(InvalidDeferredAttribute, match="exactly one argument"):
            defer(compute)  # type: ignore[arg-type]

    def test_accepts_partial_with_one_remaining_argument(self) -> None:
        deferred = defer(functools.partial(lambda prefix, r: f"{prefix}-{r.id}", "user"))
        assert deferred.resolve(Scope({"id": 3})) == "user-3"

    def test_rejects_non_callable_compute(self) -> None:
        with pytest.raises(InvalidDeferredAttribute, match="callable"):
            defer("nope")  # type: ignore[arg-type]

    def test_is_type_error(self) -> None:
        with pytest.raises(TypeError):
            defer(lambda: 1)  # type: ignore[arg-type]


class TestSequenceValue:
    def test_defaults_to_integer(self) -> None:
        value = seq("id")
        assert value.resolve(Scope({})) == 0
        assert value.resolve(Scope({})) == 1

    def test_string_format_applied(self) -> None:
        value = seq("user", "user-{:03d}")
        assert value.resolve(Scope({})) == "user-000"
        assert value.resolve(Scope({})) == "user-001"

    def test_callable_format_applied(self) -> None:
        value = seq("email", lambda n: f"me-{n}@example.com")
        assert value.resolve(Scope({})) == "me-0@example.com"

    def test_values_with_same_name_share_counter(self) -> None:
        first = seq("shared")
        second = seq("shared")
        assert first.resolve(Scope({})) == 0
        assert second.resolve(Scope({})) == 1

    def test_explicit_counter(self) -> None:
        counter = SequenceCounter()
        counter.next("id")
        value = seq("id", counter=counter)
        assert value.resolve(Scope({})) == 1


class TestFakeValue:
    def test_calls_faker_provider(self) -> None:
        value = fake.email()
        email = value.resolve(Scope({}))
        assert isinstance(email, str)
        assert "@" in email

    def test_passes_arguments(self) -> None:
        value = fake.random_int(min=5, max=5)
        assert value.resolve(Scope({})) == 5

    def test_is_lazy(self) -> None:
        assert isinstance(fake.name(), Lazy)
