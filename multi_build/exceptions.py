class BuildProcessError(Exception):
    pass
