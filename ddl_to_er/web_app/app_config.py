# -*- coding: utf-8 -*-
"""
配置管理模块 - 从环境变量加载配置
"""
import os
from dotenv import load_dotenv

# 加载 .env 文件（如果存在）
load_dotenv()


class Config:
    """基础配置类"""

    # Flask 配置
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')
    DEBUG = False
    TESTING = False

    # 解析限制：单次提交的 SQL 最大字符数
    MAX_SQL_LENGTH = int(os.getenv('MAX_SQL_LENGTH', '1000000'))
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(16 * 1024 * 1024)))

    # 解析结果缓存
    PARSE_CACHE_SIZE = int(os.getenv('PARSE_CACHE_SIZE', '10'))
    PARSE_CACHE_TTL = int(os.getenv('PARSE_CACHE_TTL', '3600'))

    # 频率限制 (flask-limiter)
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = os.getenv('RATELIMIT_DEFAULT', '200 per hour')
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')

    # 日志
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    # 图表输出
    DIAGRAM_OUTPUT_DIR = os.getenv('DIAGRAM_OUTPUT_DIR', 'output')

    # 服务器
    HOST = os.getenv('HOST', '0.0.0.0')
    PORT = int(os.getenv('PORT', '5001'))


class DevelopmentConfig(Config):
    """开发环境配置"""
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """生产环境配置"""
    DEBUG = False

    # 生产环境必须设置这些变量
    @classmethod
    def validate(cls):
        """验证生产环境必需的配置"""
        required = [
            ('SECRET_KEY', cls.SECRET_KEY, 'dev-secret-key-change-in-production'),
        ]

        missing = []
        for name, value, default in required:
            if not value or value == default:
                missing.append(name)

        if missing:
            raise ValueError(f"Missing required production settings: {', '.join(missing)}")

        if cls.MAX_SQL_LENGTH <= 0:
            raise ValueError("MAX_SQL_LENGTH must be positive")


class TestingConfig(Config):
    """测试环境配置"""
    TESTING = True
    RATELIMIT_ENABLED = False
    PARSE_CACHE_TTL = 60


# 根据环境变量选择配置
def get_config():
    """根据 FLASK_ENV 环境变量获取对应的配置类"""
    env = os.getenv('FLASK_ENV', 'development')

    config_map = {
        'development': DevelopmentConfig,
        'production': ProductionConfig,
        'testing': TestingConfig
    }

    return config_map.get(env, DevelopmentConfig)

