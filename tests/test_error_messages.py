"""
Error Message Tests

Tests for the exception hierarchy and the information error messages carry
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from wiremap import WiremapContainer
from wiremap.exceptions import (
    CircularDependencyError,
    InvalidIdentifierError,
    NotFoundError,
    NotInstantiableError,
    UnresolvableParameterError,
    WiremapConfigError,
    WiremapError,
)

from fixtures import ArrayLogger, BaseStorage, Database, LoggerInterface


class TestExceptionHierarchy(unittest.TestCase):

    def test_all_errors_derive_from_wiremap_error(self):
        for error in (
            CircularDependencyError,
            InvalidIdentifierError,
            NotFoundError,
            NotInstantiableError,
            UnresolvableParameterError,
            WiremapConfigError,
        ):
            with self.subTest(error=error.__name__):
                self.assertTrue(issubclass(error, WiremapError))

    def test_catch_any_container_error(self):
        """WiremapError catches every resolution failure."""
        container = WiremapContainer()
        for target in (LoggerInterface, BaseStorage, "missing.Module"):
            with self.subTest(target=target):
                with self.assertRaises(WiremapError):
                    container.get(target)

    def test_circular_dependency_chain_defaults_to_empty(self):
        self.assertEqual(CircularDependencyError("cycle").chain, [])

    def test_unresolvable_parameter_attributes(self):
        error = UnresolvableParameterError(
            "message", parameter="api_key", type_name="str", declaring_class="app.Client"
        )
        self.assertEqual(str(error), "message")
        self.assertEqual(error.parameter, "api_key")
        self.assertEqual(error.type_name, "str")
        self.assertEqual(error.declaring_class, "app.Client")


class TestErrorMessages(unittest.TestCase):

    def setUp(self):
        self.container = WiremapContainer()

    def test_not_found_lists_bound_types(self):
        self.container.bind(Database)
        with self.assertRaises(NotFoundError) as ctx:
            self.container.get(LoggerInterface)

        message = str(ctx.exception)
        self.assertIn("Service fixtures.LoggerInterface not found", message)
        self.assertIn("Bound types: fixtures.Database", message)
        self.assertIn("Hint: container.bind(LoggerInterface", message)

    def test_not_found_without_bindings(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.container.get(LoggerInterface)
        self.assertIn("Bound types: None", str(ctx.exception))

    def test_not_instantiable_names_the_class(self):
        with self.assertRaises(NotInstantiableError) as ctx:
            self.container.get(BaseStorage)
        self.assertIn("fixtures.BaseStorage is abstract", str(ctx.exception))

    def test_invalid_identifier_message(self):
        with self.assertRaises(InvalidIdentifierError) as ctx:
            self.container.get("missing.Module")
        self.assertEqual(
            str(ctx.exception),
            "'missing.Module' must be a valid class or interface",
        )

    def test_invalid_identifier_for_instance(self):
        with self.assertRaises(InvalidIdentifierError):
            self.container.bind(ArrayLogger(), lambda: ArrayLogger())


if __name__ == "__main__":
    unittest.main()
