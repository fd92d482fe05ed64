"""Label Service Registry (LSR).

Small sidecar that keeps a registry of services advertised by running containers:
 - containers self-advertise with an address label and a name label
 - a background poller lists running containers on a fixed interval
 - discovered services are cached with a time-to-live
 - the current cache is served as a sorted JSON list over HTTP
"""
