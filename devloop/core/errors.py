"""
Errors raised by the build orchestrator.
"""


class BuildError(RuntimeError):
    """An artifact could not be built, tagged or pushed"""

    def __init__(self, image_name: str, stage: str, reason: str):
        self.image_name = image_name
        self.stage = stage
        self.reason = reason
        super().__init__(f"{stage} failed for {image_name or '<unnamed>'}: {reason}")


class UnknownArtifactTypeError(BuildError):
    """The artifact declares no supported build method"""

    def __init__(self, image_name: str):
        super().__init__(image_name, "build", "undefined artifact type")
