APP_NAME = "agent-platform"
APP_VERSION = "0.1.0"
