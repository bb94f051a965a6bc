"""Exceptions raised by tenancy port implementations."""


class PaymentProviderError(Exception):
    """Raised when the payment provider rejects or fails a call.

    The subscription record is left unchanged when this is raised.
    """

    pass


class NoProviderSubscriptionError(PaymentProviderError):
    """Raised when a subscription has no provider-side id to act on.

    Trial subscriptions that never went through checkout have nothing to
    cancel or resume at the provider.
    """

    pass
