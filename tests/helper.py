import os

ROOT_DIR = os.path.dirname(os.path.abspath(__file__))
DOCKER_DATA_DIR = os.path.join(ROOT_DIR, "data", "docker")


def data_file(name: str) -> str:
    return os.path.join(DOCKER_DATA_DIR, name)
