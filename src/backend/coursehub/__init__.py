"""
CourseHub 后端

课程学习进度、课程 slug 与测验尝试管理
"""
