"""Shared assertion helpers for the apidoc test-suite."""

from __future__ import annotations

from tests.helpers.immutability import assert_frozen_attribute, assert_frozen_model

__all__ = ["assert_frozen_attribute", "assert_frozen_model"]
