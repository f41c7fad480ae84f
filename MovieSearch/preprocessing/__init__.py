"""
Preprocessing module for text processing in information retrieval tasks.
Includes tokenization, lowercase conversion and stop word filtering.
"""
from .tokenizer import RegexMatchTokenizer, Token, Tokenizer
from .preprocess import (
    LowercasePreprocessor,
    PreprocessingPipeline,
    StopWordsPreprocessor,
    TokenPreprocessor,
    create_pipeline,
    default_pipeline,
    tokenize,
)
from .document import Document
