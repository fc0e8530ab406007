# config.py


class Config:
    DEBUG = False
    TESTING = False
    MAX_CONTENT_LENGTH = 32 * 1024 * 1024   # report + catalog payloads


class ProductionConfig(Config):
    pass


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
