"""
业务异常定义

服务层抛出，由 API 层转换为对应的 HTTP 状态码
"""


class NotFoundError(ValueError):
    """资源不存在（404）"""


class NotEnrolledError(PermissionError):
    """学员未报名该课程（403）"""


class AttemptAlreadyCompletedError(Exception):
    """测验尝试已提交过（409）"""


class AttemptConflictError(Exception):
    """并发创建测验尝试时编号冲突且重试耗尽（409）"""


class AttemptLimitReachedError(Exception):
    """测验尝试次数已用完（409）"""
