"""Ordered request pipeline for API views.

Before a handler runs, every API view executes the stages in ``pipeline``:

    rate_limit -> sanitize -> authenticate -> authorize

Each stage takes the view and the request and raises a DRF exception to stop
the request. Resource-level checks (ownership, order state, field rules) run
afterwards inside the handler once the resource has been loaded.
"""

from .sanitization import sanitize_request


def rate_limit(view, request):
    view.applied_throttles = view.get_throttles()
    waits = [
        throttle.wait()
        for throttle in view.applied_throttles
        if not throttle.allow_request(request, view)
    ]
    if waits:
        known = [w for w in waits if w is not None]
        view.throttled(request, max(known) if known else None)


def sanitize(view, request):
    sanitize_request(request, view.kwargs)


def authenticate(view, request):
    view.perform_authentication(request)


def authorize(view, request):
    view.check_permissions(request)


DEFAULT_PIPELINE = (
    ("rate_limit", rate_limit),
    ("sanitize", sanitize),
    ("authenticate", authenticate),
    ("authorize", authorize),
)


class PipelineMixin:
    """Replace DRF's implicit auth/permission/throttle order with ``pipeline``."""

    pipeline = DEFAULT_PIPELINE

    def initial(self, request, *args, **kwargs):
        self.format_kwarg = self.get_format_suffix(**kwargs)

        neg = self.perform_content_negotiation(request)
        request.accepted_renderer, request.accepted_media_type = neg

        version, scheme = self.determine_version(request, *args, **kwargs)
        request.version, request.versioning_scheme = version, scheme

        for _name, stage in self.pipeline:
            stage(self, request)

    def finalize_response(self, request, response, *args, **kwargs):
        for throttle in getattr(self, "applied_throttles", ()):
            settle = getattr(throttle, "settle", None)
            if settle is not None:
                settle(request, response)
        return super().finalize_response(request, response, *args, **kwargs)
