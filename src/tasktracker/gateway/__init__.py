"""tasktracker Gateway -- FastAPI 请求处理层"""
