"""
Wiremap Exceptions

Custom exception hierarchy for the wiremap container
"""

from typing import Any, List, Optional


class WiremapError(Exception):
    """
    Base exception for all wiremap errors.

    All wiremap-specific exceptions inherit from this class.
    You can catch this to handle any container error generically.

    Example:
        >>> try:
        ...     service = container.get(MyService)
        ... except WiremapError as e:
        ...     print(f"DI error: {e}")
    """

    pass


class InvalidIdentifierError(WiremapError):
    """
    Raised when a binding or resolution target is not a known class.

    Only classes (or dotted identifiers naming an importable class) can be
    bound or resolved. There are no "magic string" service names.

    Common causes:
        - Passing an instance or a function instead of a class
        - Typo in a dotted identifier such as ``"app.services.Mailer"``
        - The module holding the class cannot be imported

    Solution:
        Bind the class object itself, or its fully qualified name::

            container.bind(Mailer)
            container.bind("app.services.Mailer")
    """

    pass


class NotFoundError(WiremapError):
    """
    Raised when nothing can produce an instance for the requested type.

    The type has no binding, no cached instance, and cannot be autowired.
    This is typically an interface (``typing.Protocol``) nobody bound.

    Solution:
        Bind the interface to a factory::

            container.bind(PaymentClient, lambda r: r.get(SandboxClient))
    """

    pass


class NotInstantiableError(WiremapError):
    """
    Raised when autowiring targets a class that cannot be constructed.

    Common causes:
        - Abstract base class with unimplemented abstract methods
        - Protocol or Enum passed to ``bind()`` without a factory

    Solution:
        Bind the abstraction to a concrete implementation::

            container.bind(Storage, lambda r: r.get(DiskStorage))
    """

    pass


class UnresolvableParameterError(WiremapError):
    """
    Raised when a constructor parameter cannot be supplied.

    A parameter can be supplied when its annotation is a class the container
    knows, when it declares a default value, or when it is ``Optional``.

    Example of an unresolvable parameter::

        class Client:
            def __init__(self, api_key: str): ...  # str cannot be autowired

    Solution:
        Give the parameter a default, or bind ``Client`` with a factory::

            container.bind(Client, lambda: Client(api_key=settings.api_key))
    """

    def __init__(
        self,
        message: str,
        parameter: Optional[str] = None,
        type_name: Optional[str] = None,
        declaring_class: Optional[str] = None,
    ):
        super().__init__(message)
        self.parameter = parameter
        self.type_name = type_name
        self.declaring_class = declaring_class


class CircularDependencyError(WiremapError):
    """
    Raised when circular dependency is detected during autowiring.

    This error occurs when type A depends on type B, and type B
    (directly or indirectly) depends on type A.

    Example of circular dependency::

        class ServiceA:
            def __init__(self, b: ServiceB): ...

        class ServiceB:
            def __init__(self, a: ServiceA): ...  # Circular!

    Attributes:
        chain: The cycle path in traversal order, ending with the repeated type

    Solution:
        1. Refactor to remove the circular dependency
        2. Extract the shared functionality into a third service
    """

    def __init__(self, message: str, chain: Optional[List[Any]] = None):
        super().__init__(message)
        self.chain = list(chain or [])


class WiremapConfigError(WiremapError):
    """
    Raised when the configuration file does not provide bindings.

    The configuration file must define a module-level ``BINDINGS`` mapping::

        # wiremap_config.py
        BINDINGS = {
            LoggerInterface: lambda: FileLogger("/var/log/app.log"),
        }
    """

    pass
