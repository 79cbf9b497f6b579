# Copyright 2026 Stache Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for presenter signature inspection."""

import gc
import weakref

import pytest

from stache.model.capability import PresenterCapability
from stache.presenter.base import Presenter, conditional
from stache.presenter.inspector import (
    UnavailableMethodError,
    available,
    build_descriptor,
    capability_of,
    describe,
    inspect_method,
)

# ###############
# Test Helpers
# ###############


class CatalogPresenter(Presenter):
    def title(self) -> str:
        return "Catalog"

    def reverse(self, text: str) -> str:
        return text[::-1]

    def summary(self, length: str = "long") -> str:
        return length

    def widget(self, *, size: str, color: str | None = None) -> str:
        return size

    def positional_only(self, key: str, /) -> str:
        return key

    def pair(self, x: str, y: str) -> None:
        pass

    def pair_with_default(self, x: str, y: str = "") -> None:
        pass

    def splat(self, *args: str) -> None:
        pass

    def loose(self, *, size: str, **extra: str) -> str:
        return size

    @conditional
    def even(self, number: str) -> bool:
        return int(number) % 2 == 0

    def internal(self) -> str:
        return "internal"

    @classmethod
    def method_available(cls, identifier: str) -> bool:
        return identifier != "internal"


class FeaturedCatalogPresenter(CatalogPresenter):
    def title(self, prefix: str = "") -> str:
        return prefix + "Featured"

    def badge(self) -> str:
        return "new"


# ###############
# inspect_method
# ###############


class TestInspectMethod:
    def test_zero_arity(self) -> None:
        cap = inspect_method(CatalogPresenter.title)
        assert cap == PresenterCapability(identifier="title", attribute="title")
        assert not cap.accepts_parameter

    def test_required_positional(self) -> None:
        cap = inspect_method(CatalogPresenter.reverse)
        assert cap.positional_count == 1
        assert cap.requires_parameter

    def test_optional_positional(self) -> None:
        cap = inspect_method(CatalogPresenter.summary)
        assert cap.accepts_parameter
        assert cap.positional_optional
        assert not cap.requires_parameter

    def test_positional_only(self) -> None:
        cap = inspect_method(CatalogPresenter.positional_only)
        assert cap.requires_parameter

    def test_keyword_only_parameters(self) -> None:
        cap = inspect_method(CatalogPresenter.widget)
        assert cap.required_keywords == frozenset({"size"})
        assert cap.optional_keywords == frozenset({"color"})
        assert cap.keywords == frozenset({"size", "color"})

    def test_two_positionals_are_unsupported(self) -> None:
        assert inspect_method(CatalogPresenter.pair).unsupported_arity

    def test_second_positional_with_default_is_unsupported(self) -> None:
        assert inspect_method(CatalogPresenter.pair_with_default).unsupported_arity

    def test_variadic_is_unsupported(self) -> None:
        cap = inspect_method(CatalogPresenter.splat)
        assert cap.variadic
        assert cap.unsupported_arity

    def test_var_keyword_is_ignored(self) -> None:
        cap = inspect_method(CatalogPresenter.loose)
        assert cap.keywords == frozenset({"size"})

    def test_conditional_identifier(self) -> None:
        cap = inspect_method(CatalogPresenter.even)
        assert cap.identifier == "even?"
        assert cap.attribute == "even"
        assert cap.is_conditional


# ###############
# Descriptors
# ###############


class TestDescriptor:
    def test_registered_at_class_definition(self) -> None:
        assert describe(CatalogPresenter) is CatalogPresenter.descriptor()

    def test_available(self) -> None:
        descriptor = describe(CatalogPresenter)
        assert available(descriptor, "title")
        assert available(descriptor, "even?")
        assert not available(descriptor, "even")
        assert not available(descriptor, "missing")

    def test_policy_withholds_declared_method(self) -> None:
        descriptor = describe(CatalogPresenter)
        assert "internal" in descriptor.capabilities
        assert "internal" in descriptor.withheld
        assert not descriptor.available("internal")

    def test_base_class_members_are_not_capabilities(self) -> None:
        descriptor = describe(CatalogPresenter)
        assert not descriptor.available("method_available")
        assert not descriptor.available("descriptor")

    def test_capability_of(self) -> None:
        cap = capability_of(describe(CatalogPresenter), "widget")
        assert cap.required_keywords == frozenset({"size"})

    def test_capability_of_unavailable(self) -> None:
        with pytest.raises(UnavailableMethodError) as exc_info:
            capability_of(describe(CatalogPresenter), "internal")
        assert exc_info.value.identifier == "internal"
        assert exc_info.value.presenter_class is CatalogPresenter
        assert "CatalogPresenter does not expose 'internal'" in str(exc_info.value)

    def test_identifiers_are_sorted_and_exclude_withheld(self) -> None:
        identifiers = describe(CatalogPresenter).identifiers
        assert identifiers == sorted(identifiers)
        assert "internal" not in identifiers
        assert "title" in identifiers

    def test_capabilities_are_read_only(self) -> None:
        descriptor = describe(CatalogPresenter)
        with pytest.raises(TypeError):
            descriptor.capabilities["extra"] = PresenterCapability(  # type: ignore[index]
                identifier="extra", attribute="extra"
            )

    def test_methods_added_later_are_not_exposed(self) -> None:
        class LatePresenter(Presenter):
            def first(self) -> str:
                return "first"

        LatePresenter.second = lambda self: "second"  # type: ignore[attr-defined]
        assert describe(LatePresenter).available("first")
        assert not describe(LatePresenter).available("second")


class TestInheritance:
    def test_inherits_parent_methods(self) -> None:
        descriptor = describe(FeaturedCatalogPresenter)
        assert descriptor.available("reverse")
        assert descriptor.available("badge")

    def test_override_changes_call_shape(self) -> None:
        assert describe(CatalogPresenter).capability_of("title").accepts_parameter is False
        assert describe(FeaturedCatalogPresenter).capability_of("title").positional_optional is True

    def test_inherits_availability_policy(self) -> None:
        assert not describe(FeaturedCatalogPresenter).available("internal")

    def test_subclass_has_its_own_descriptor(self) -> None:
        assert describe(FeaturedCatalogPresenter) is not describe(CatalogPresenter)
        assert describe(FeaturedCatalogPresenter).presenter_class is FeaturedCatalogPresenter

    def test_mixin_listed_after_presenter_is_exposed(self) -> None:
        class ShoutingMixin:
            def shout(self, text: str) -> str:
                return text.upper()

        class MixedPresenter(Presenter, ShoutingMixin):
            def title(self) -> str:
                return "Mixed"

        descriptor = describe(MixedPresenter)
        assert descriptor.identifiers == ["shout", "title"]
        assert descriptor.capability_of("shout").requires_parameter

    def test_presenter_root_members_shadow_mixins(self) -> None:
        class Helpers:
            def descriptor(self) -> str:
                return "shadowed"

        class HelpedPresenter(Presenter, Helpers):
            pass

        assert not describe(HelpedPresenter).available("descriptor")


class TestPlainClasses:
    def test_plain_class_is_described_on_demand(self) -> None:
        class Plain:
            def title(self) -> str:
                return "plain"

        descriptor = describe(Plain)
        assert descriptor.identifiers == ["title"]
        assert describe(Plain) is descriptor

    def test_build_descriptor_is_not_memoized(self) -> None:
        class Plain:
            def title(self) -> str:
                return "plain"

        assert build_descriptor(Plain) is not build_descriptor(Plain)
        assert dict(build_descriptor(Plain).capabilities) == dict(build_descriptor(Plain).capabilities)

    def test_plain_class_without_policy_exposes_everything(self) -> None:
        class Plain:
            def a(self) -> None:
                pass

            def b(self) -> None:
                pass

        assert describe(Plain).withheld == frozenset()

    def test_described_class_can_be_garbage_collected(self) -> None:
        class Plain:
            def title(self) -> str:
                return "plain"

        describe(Plain)
        ref = weakref.ref(Plain)
        del Plain
        gc.collect()
        assert ref() is None

    def test_instance_method_policy_is_rejected(self) -> None:
        class Plain:
            def title(self) -> str:
                return "plain"

            def method_available(self, identifier: str) -> bool:
                return True

        with pytest.raises(TypeError, match="must be a classmethod or staticmethod"):
            build_descriptor(Plain)

    def test_static_policy_is_applied_and_never_exposed(self) -> None:
        class Plain:
            def title(self) -> str:
                return "plain"

            def secret(self) -> str:
                return "hidden"

            @staticmethod
            def method_available(identifier: str) -> bool:
                return identifier != "secret"

        descriptor = build_descriptor(Plain)
        assert descriptor.identifiers == ["title"]
        assert "method_available" not in descriptor.capabilities


def test_presenter_root_has_an_empty_descriptor() -> None:
    """The Presenter root itself exposes nothing."""
    assert Presenter.descriptor().identifiers == []
    assert Presenter.descriptor().presenter_class is Presenter


# ###############
# conditional decorator
# ###############


def test_conditional_rejects_identifier_without_question_mark() -> None:
    """An explicit conditional identifier must end with '?'."""
    with pytest.raises(ValueError):

        @conditional("ready")
        def ready(self: object) -> bool:
            return True


def test_conditional_with_explicit_identifier() -> None:
    """An explicit identifier replaces the method-name default."""

    class Lists(Presenter):
        @conditional("empty?")
        def has_no_items(self) -> bool:
            return True

    descriptor = describe(Lists)
    assert descriptor.identifiers == ["empty?"]
    assert descriptor.capability_of("empty?").attribute == "has_no_items"
