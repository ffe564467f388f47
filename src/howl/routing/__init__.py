"""Routing: request path to render context.

Paths are normalized, prefixed with the default module when they name no
module, then resolved to a module index or a single content record.
Resolution returns a value (:class:`~howl.routing.outcomes.RenderContext`,
:class:`~howl.routing.outcomes.NotFound` or
:class:`~howl.routing.outcomes.ServerError`) rather than raising.
"""
