from __future__ import annotations

from typing import Any

import pytest
from binding_fixtures import Company, Endpoint, Foo, Service

from propbind.binding import (
    ClassResolutionError,
    ConstructionError,
    NoCompatibleMutatorError,
    PropertyBindingError,
    TypeConversionError,
    UnresolvedPlaceholderError,
    UnresolvedReferenceError,
    bind_properties,
    bind_property,
    build,
)
from propbind.container import BindingContext
from propbind.registry import ClassNotFoundError

COMPANY_CLASS = f"{Company.__module__}.{Company.__qualname__}"


def _assert_bound(foo: Foo) -> None:
    assert foo.name == "James"
    assert foo.bar.get_age() == 33
    assert foo.bar.is_rider()
    assert foo.bar.is_gold_customer()
    work = foo.bar.get_work()
    assert work is not None
    assert work.id == 123
    assert work.name == "Acme"


def test_bind_properties(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {
        "name": "James",
        "bar.age": "33",
        "bar.{{committer}}": "true",
        "bar.gold-customer": "true",
        "bar.work.id": "123",
        "bar.work.name": "{{companyName}}",
    }

    assert bind_properties(context, foo, prop)

    _assert_bound(foo)
    assert prop == {}


def test_bind_with_fluent_builder(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {
        "bar.age": "33",
        "bar.{{committer}}": "true",
        "bar.gold-customer": "true",
        "bar.work.name": "{{companyName}}",
    }

    (
        build()
        .with_context(context)
        .with_target(foo)
        .with_property("name", "James")
        .with_property("bar.work.id", "123")
        .with_properties(prop)
        .bind()
    )

    _assert_bound(foo)
    assert prop == {}


def test_bind_properties_ignore_case(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {
        "name": "James",
        "bar.AGE": "33",
        "BAR.{{committer}}": "true",
        "bar.gOLd-Customer": "true",
        "bAr.work.ID": "123",
        "bar.WORk.naME": "{{companyName}}",
    }

    build().with_ignore_case(True).bind(context, foo, prop)

    _assert_bound(foo)
    assert prop == {}


def test_case_sensitive_mode_leaves_other_casings_unbound(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {"bar.AGE": "33", "bar.age": "34"}

    assert not bind_properties(context, foo, prop)

    assert foo.bar.get_age() == 34
    assert prop == {"bar.AGE": "33"}


def test_bind_properties_with_option_prefix(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {
        "my.prefix.name": "James",
        "my.prefix.bar.age": "33",
        "my.prefix.bar.{{committer}}": "true",
        "my.prefix.bar.gold-customer": "true",
        "my.prefix.bar.work.id": "123",
        "my.prefix.bar.work.name": "{{companyName}}",
        "my.other.prefix.something": "test",
    }

    build().with_option_prefix("my.prefix.").bind(context, foo, prop)

    _assert_bound(foo)
    assert prop == {"my.other.prefix.something": "test"}


def test_bind_properties_with_option_prefix_ignore_case(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {
        "my.prefix.name": "James",
        "my.PREFIX.bar.AGE": "33",
        "my.prefix.bar.{{committer}}": "true",
        "My.prefix.bar.Gold-custoMER": "true",
        "mY.prefix.bar.work.ID": "123",
        "my.prEFIx.bar.Work.Name": "{{companyName}}",
        "my.other.prefix.something": "test",
    }

    build().with_option_prefix("my.prefix.").with_ignore_case(True).bind(context, foo, prop)

    _assert_bound(foo)
    assert prop == {"my.other.prefix.something": "test"}


def test_nested(context: BindingContext) -> None:
    foo = Foo()

    assert build().bind(context, foo, "name", "James")
    assert build().bind(context, foo, "bar.age", "33")
    assert build().bind(context, foo, "bar.{{committer}}", "true")
    assert build().bind(context, foo, "bar.gold-customer", "true")
    assert build().bind(context, foo, "bar.work.id", "123")
    assert build().bind(context, foo, "bar.work.name", "{{companyName}}")

    _assert_bound(foo)


def test_nested_intermediate_is_reused_not_replaced(context: BindingContext) -> None:
    foo = Foo()
    bar = foo.bar

    bind_property(context, foo, "bar.work.id", "1")
    work = foo.bar.get_work()
    bind_property(context, foo, "bar.work.name", "Initech")

    assert foo.bar is bar
    assert foo.bar.get_work() is work
    assert work is not None
    assert (work.id, work.name) == (1, "Initech")


def test_nested_bean_reference(context: BindingContext) -> None:
    foo = Foo()

    build().bind(context, foo, "name", "James")
    build().bind(context, foo, "bar.age", "33")
    build().bind(context, foo, "bar.gold-customer", "true")
    build().bind(context, foo, "bar.rider", "true")
    build().bind(context, foo, "bar.work", "#bean:myWork")

    assert foo.bar.is_rider()
    assert foo.bar.get_work() is context.registry.lookup_by_name("myWork")
    work = foo.bar.get_work()
    assert work is not None
    assert (work.id, work.name) == (456, "Acme")


def test_nested_type_reference(context: BindingContext) -> None:
    foo = Foo()

    build().bind(context, foo, "bar.work", f"#type:{COMPANY_CLASS}")

    work = foo.bar.get_work()
    assert work is context.registry.lookup_by_name("myWork")


def test_nested_class_reference_creates_new_instance(context: BindingContext) -> None:
    foo = Foo()

    build().bind(context, foo, "bar.work", f"#class:{COMPANY_CLASS}")

    work = foo.bar.get_work()
    assert isinstance(work, Company)
    assert work is not context.registry.lookup_by_name("myWork")
    assert work.id == 0
    assert work.name is None


def test_autowired(context: BindingContext) -> None:
    foo = Foo()

    assert build().bind(context, foo, "bar.work", "#autowired")

    assert foo.bar.get_work() is context.registry.lookup_by_name("myWork")


def test_mandatory(context: BindingContext) -> None:
    foo = Foo()

    assert build().with_mandatory(True).bind(context, foo, "name", "James")

    bound = build().bind(context, foo, "bar.myAge", "33")
    assert not bound

    with pytest.raises(NoCompatibleMutatorError) as excinfo:
        build().with_mandatory(True).bind(context, foo, "bar.myAge", "33")

    assert excinfo.value.property_name == "bar.myAge"
    assert excinfo.value.target is foo
    assert "bar.myAge" in str(excinfo.value)


def test_mandatory_bulk_bind_stops_at_first_unbound_key(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {"name": "James", "unknown": "x"}

    with pytest.raises(NoCompatibleMutatorError) as excinfo:
        bind_properties(context, foo, prop, mandatory=True)

    assert excinfo.value.property_name == "unknown"
    assert "unknown" in prop


def test_optional_unbound_key_leaves_target_untouched(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {"bar.myAge": "33"}

    assert not bind_properties(context, foo, prop)

    assert prop == {"bar.myAge": "33"}
    assert foo.bar.get_age() == 0
    assert foo.name is None


def test_does_not_exist_class(context: BindingContext) -> None:
    foo = Foo()

    build().bind(context, foo, "name", "James")
    with pytest.raises(ClassResolutionError) as excinfo:
        build().bind(context, foo, "bar.work", f"#class:{Company.__module__}.DoesNotExist")

    assert isinstance(excinfo.value.__cause__, ClassNotFoundError)
    assert excinfo.value.property_name == "bar.work"


def test_null_injector_class(context: BindingContext) -> None:
    class NullInjector:
        def new_instance(self, type_: type) -> Any:
            return None

    context.injector = NullInjector()
    foo = Foo()

    build().bind(context, foo, "name", "James")
    with pytest.raises(ConstructionError) as excinfo:
        build().bind(context, foo, "bar.work", f"#class:{COMPANY_CLASS}")

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert isinstance(excinfo.value, PropertyBindingError)


def test_bind_twice_yields_same_state(context: BindingContext) -> None:
    source = {
        "name": "James",
        "bar.age": "33",
        "bar.{{committer}}": "true",
        "bar.work.id": "123",
        "bar.work.name": "{{companyName}}",
    }
    first, second = Foo(), Foo()

    bind_properties(context, first, dict(source))
    bind_properties(context, second, dict(source))

    for foo in (first, second):
        work = foo.bar.get_work()
        assert work is not None
        assert (foo.name, foo.bar.get_age(), foo.bar.is_rider(), work.id, work.name) == (
            "James",
            33,
            True,
            123,
            "Acme",
        )


def test_number_is_bound_to_string_member(context: BindingContext) -> None:
    foo = Foo()

    assert bind_property(context, foo, "name", 123)

    assert foo.name == "123"


def test_skipped_key_does_not_assign_created_intermediates(context: BindingContext) -> None:
    service = Service()

    assert not bind_property(context, service, "endpoint.nope", "x")
    assert service.endpoint is None

    with pytest.raises(NoCompatibleMutatorError):
        bind_property(context, service, "endpoint.nope", "x", mandatory=True)
    assert service.endpoint is None

    assert bind_property(context, service, "endpoint.port", "8080")
    assert service.endpoint == Endpoint(port=8080)


def test_unresolved_placeholder_in_key_raises_when_optional(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {"name": "James", "bar.{{missing}}": "true"}

    with pytest.raises(UnresolvedPlaceholderError) as excinfo:
        bind_properties(context, foo, prop, mandatory=False)

    assert excinfo.value.property_name == "bar.{{missing}}"
    assert excinfo.value.target is foo
    assert prop == {"bar.{{missing}}": "true"}
    assert foo.name == "James"


def test_unresolved_placeholder_in_value_raises_when_optional(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {"bar.work.name": "{{missing}}"}

    with pytest.raises(UnresolvedPlaceholderError) as excinfo:
        bind_properties(context, foo, prop, mandatory=False)

    assert excinfo.value.property_name == "bar.work.name"
    assert prop == {"bar.work.name": "{{missing}}"}
    assert foo.bar.get_work() is None


def test_conversion_failure_raises_when_optional(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {"name": "James", "bar.age": "abc"}

    with pytest.raises(TypeConversionError) as excinfo:
        bind_properties(context, foo, prop, mandatory=False)

    assert excinfo.value.property_name == "bar.age"
    assert excinfo.value.value == "abc"
    assert prop == {"bar.age": "abc"}
    assert foo.bar.get_age() == 0


def test_unknown_bean_raises_when_optional(context: BindingContext) -> None:
    foo = Foo()
    prop: dict[str, Any] = {"bar.work": "#bean:nope"}

    with pytest.raises(UnresolvedReferenceError) as excinfo:
        bind_properties(context, foo, prop, mandatory=False)

    assert excinfo.value.property_name == "bar.work"
    assert prop == {"bar.work": "#bean:nope"}
    assert foo.bar.get_work() is None
