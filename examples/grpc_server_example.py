"""Example gRPC server observed by a RequestObserver.

Run with:
    REQOBSERVER_MONGO_URI=mongodb://localhost:27017 python examples/grpc_server_example.py

Methods (raw bytes, no generated code needed):
    /example.Echo/Say   - echoes the request
    /example.Echo/Fail  - always fails, recording an error event

Each call writes one metrics document, and each failed call one error
document, to the collection named by REQOBSERVER_COLLECTION.

Call it with:
    python examples/grpc_server_example.py call Say hello
"""

import sys
from concurrent import futures

import grpc

from reqobserver import ObserverError, RequestObserver

ADDRESS = "localhost:50051"


def say(request: bytes, context: grpc.ServicerContext) -> bytes:
    return b"echo: " + request


def fail(request: bytes, context: grpc.ServicerContext) -> bytes:
    raise RuntimeError("disk full")


def serve() -> None:
    observer = RequestObserver.from_settings()
    try:
        observer.ping()
    except ObserverError as exc:
        # Serving continues; events are lost until the datastore is back
        print(f"warning: {exc}", file=sys.stderr)

    server = grpc.server(
        futures.ThreadPoolExecutor(max_workers=10),
        interceptors=[observer.interceptor()],
    )
    handlers = {
        "Say": grpc.unary_unary_rpc_method_handler(say),
        "Fail": grpc.unary_unary_rpc_method_handler(fail),
    }
    server.add_generic_rpc_handlers(
        (grpc.method_handlers_generic_handler("example.Echo", handlers),)
    )
    server.add_insecure_port(ADDRESS)
    server.start()
    print(f"serving on {ADDRESS}")
    server.wait_for_termination()


def call(method: str, payload: str) -> None:
    with grpc.insecure_channel(ADDRESS) as channel:
        try:
            response = channel.unary_unary(f"/example.Echo/{method}")(
                payload.encode(), timeout=5
            )
        except grpc.RpcError as exc:
            print(f"{exc.code().name}: {exc.details()}")
            return
        print(response.decode())


if __name__ == "__main__":
    if len(sys.argv) >= 4 and sys.argv[1] == "call":
        call(sys.argv[2], sys.argv[3])
    else:
        serve()
