from enum import Enum


class GoalType(str, Enum):
    HYPERTROPHY = "Muscle Building (Hypertrophy)"
    GLUTE_AND_SHAPE = "Glute Focus & Definition"
    METABOLIC_CONDITIONING = "Lean & Fit (Metabolic Conditioning)"
    MAX_STRENGTH = "Max Strength & Power"
    FUNCTIONAL_HYBRID = "Functional Fitness & Agility"
    LONGEVITY = "Longevity & General Health"

    def __str__(self) -> str:
        return self.value


class SplitType(str, Enum):
    FULL_BODY = "Full Body (Whole Body Every Session)"
    SPLIT = "Body Part Split (e.g. Upper/Lower, PPL)"

    def __str__(self) -> str:
        return self.value


class ImageStoreBackend(str, Enum):
    REDIS = "redis"
    FILE = "file"
    MEMORY = "memory"

    def __str__(self) -> str:
        return self.value
