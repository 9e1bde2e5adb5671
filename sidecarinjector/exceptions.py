class InjectorError(Exception):
    pass


class NamespaceResolutionError(InjectorError):
    pass


class SidecarDecodeError(InjectorError):
    pass


class InjectionError(InjectorError):
    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))
