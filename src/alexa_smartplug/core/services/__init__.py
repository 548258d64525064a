"""Services orchestrating the transport, the topology cache and the domain."""
