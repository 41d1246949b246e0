def shout(words):
    return ' '.join(words).upper()
