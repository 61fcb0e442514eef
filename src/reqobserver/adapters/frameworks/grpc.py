"""gRPC server interceptor for the request observer.

Wraps every unary-unary method handler so each call records one metrics
event and, when the handler raises (``context.abort()`` included), one
error event. Streaming handlers pass through unchanged.
"""

from typing import TYPE_CHECKING, Any

import grpc

if TYPE_CHECKING:
    from reqobserver.observer import RequestObserver


class ObserverInterceptor(grpc.ServerInterceptor):
    """Server interceptor that observes unary-unary calls.

    Example:
        ```python
        server = grpc.server(
            futures.ThreadPoolExecutor(max_workers=10),
            interceptors=[ObserverInterceptor(observer)],
        )
        ```
    """

    def __init__(self, observer: "RequestObserver") -> None:
        self.observer = observer

    def intercept_service(
        self,
        continuation: Any,
        handler_call_details: grpc.HandlerCallDetails,
    ) -> grpc.RpcMethodHandler | None:
        handler = continuation(handler_call_details)
        if handler is None or handler.unary_unary is None:
            return handler
        return grpc.unary_unary_rpc_method_handler(
            self.observer.wrap(handler.unary_unary, handler_call_details.method),
            request_deserializer=handler.request_deserializer,
            response_serializer=handler.response_serializer,
        )
