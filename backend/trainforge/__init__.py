"""TrainForge: training modules and quizzes generated from uploaded documents."""

__version__ = "0.1.0"
