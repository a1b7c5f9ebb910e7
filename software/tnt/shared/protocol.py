# shared/protocol.py

# -----------------------------
# Types (events)
# -----------------------------
TYPE_METRICS = "TYPE_METRICS"   # Robot -> Dashboard; one sampling pass
TYPE_STOP    = "TYPE_STOP"      # Robot -> Dashboard; end of session

# -----------------------------
# Payload notes
# -----------------------------
# TYPE_METRICS:
#   { "type": TYPE_METRICS, "t": float, "samples": [ {"name": str, "value": float, "t": float}, ... ] }
#     - "t" is the wall-clock time of the pass (seconds since epoch)
#     - only gauges that reported on this pass are listed; decimated gauges
#       that skipped the tick are simply absent
#
# TYPE_STOP:
#   { "type": TYPE_STOP }
