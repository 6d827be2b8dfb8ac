from .lexer import Token, find_column, tokenize
