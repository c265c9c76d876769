ROOT_PACKAGE_NAME = "imagebuilder"
CONFIG_FILE = "imagebuilder.yaml"
