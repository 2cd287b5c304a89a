"""Question sampling: entropy mixing, multi-pass shuffling, stratified selection."""

from quizengine.sampling.entropy import EntropyMixer, SeededSource
from quizengine.sampling.sampler import QuestionPool, StratifiedSampler
from quizengine.sampling.shuffle import multi_pass_shuffle

__all__ = [
    "EntropyMixer",
    "QuestionPool",
    "SeededSource",
    "StratifiedSampler",
    "multi_pass_shuffle",
]
