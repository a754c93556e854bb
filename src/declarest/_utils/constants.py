# Environment variables
ENV_BASE_URL = "DECLAREST_BASE_URL"
ENV_TIMEOUT = "DECLAREST_TIMEOUT"
ENV_VERIFY_SSL = "DECLAREST_VERIFY_SSL"
ENV_FOLLOW_REDIRECTS = "DECLAREST_FOLLOW_REDIRECTS"

# Defaults
DEFAULT_TIMEOUT = 30.0

# Tracing span attributes
SPAN_ATTR_METHOD = "http.request.method"
SPAN_ATTR_URL = "url.full"
SPAN_ATTR_STATUS_CODE = "http.response.status_code"
SPAN_ATTR_ENDPOINT = "declarest.endpoint"
