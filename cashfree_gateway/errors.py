class GatewayError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ConfigurationError(GatewayError):
    status_code = 500


class ValidationError(GatewayError):
    status_code = 400


class RouteNotFoundError(GatewayError):
    status_code = 404


class NetworkError(GatewayError):
    status_code = 500


class UpstreamError(GatewayError):
    status_code = 500

    def __init__(self, message: str, upstream_status: int = None, upstream_message: str = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.upstream_message = upstream_message
