class ServiceError(Exception):
    """服务层业务错误基类"""


class ValidationError(ServiceError):
    """输入不满足业务规则"""


class NotFoundError(ServiceError):
    """目标数据不存在"""


class AuthenticationError(ServiceError):
    """口令错误或未设置"""
