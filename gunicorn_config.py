"""
Gunicorn配置文件
用于 DDL to ER API 部署
"""
import multiprocessing
import os

# 服务器socket
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:5001")  # 监听地址和端口
backlog = 2048

# 工作进程
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "gthread"  # ParseCache 带锁，可在线程间共享
threads = 4
timeout = 30
keepalive = 2

# 重启
max_requests = 1000  # 每个工作进程处理请求的最大数量
max_requests_jitter = 50  # 随机抖动
preload_app = True  # 预加载应用

# 日志
log_dir = os.getenv("LOG_DIR", "logs")
accesslog = os.path.join(log_dir, "gunicorn_access.log")  # 访问日志
errorlog = os.path.join(log_dir, "gunicorn_error.log")   # 错误日志
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s"'

# 进程命名
proc_name = "ddl_to_er_app"

# 其他设置
daemon = False
pidfile = os.path.join(log_dir, "gunicorn.pid")
tmp_upload_dir = None


def on_starting(server):
    os.makedirs(log_dir, exist_ok=True)
