"""tasktracker Core -- 领域模型、Store 与配置"""
