"""
WSGI入口文件
用于Gunicorn部署
"""
import os

# 设置环境变量
os.environ.setdefault('FLASK_ENV', 'production')

# 导入Flask应用
from ddl_to_er.web_app.app import create_app
from ddl_to_er.web_app.app_config import get_config

# 应用生产配置
config = get_config()
if hasattr(config, 'validate'):
    config.validate()

app = create_app(config)

# 创建必要的目录
os.makedirs(config.DIAGRAM_OUTPUT_DIR, exist_ok=True)

if __name__ == "__main__":
    app.run(host=config.HOST, port=config.PORT, debug=config.DEBUG)
else:
    # 这是WSGI服务器调用的应用对象
    application = app
