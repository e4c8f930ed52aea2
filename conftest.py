# Configuration is read from the environment when imgproxy_bridge.vars is
# first imported, so it has to be in place before any test module loads.
import os
import sys

SERVICE_ROOT = os.path.dirname(__file__)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

os.environ["IMGPROXY_BASE_URL"] = "http://imgproxy.test:8080"
for name in ("IMGPROXY_KEY", "IMGPROXY_SALT", "IMGPROXY_SECRET", "IMGPROXY_ENDPOINT", "OTLP_ENDPOINT"):
    os.environ.pop(name, None)
