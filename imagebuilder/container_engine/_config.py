DOCKERFILE = "Dockerfile"
RETENTION_LABEL = "quay.expires-after"

# Seconds.
BUILD_TIMEOUT = 300
TAG_TIMEOUT = 120
PUSH_TIMEOUT = 120
