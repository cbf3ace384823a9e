"""Translation services.

Imports are not eagerly loaded here. Use explicit imports:
    from lingolive.services.translation.resolver import TranslationResolver
    from lingolive.services.translation.phrases import default_phrasebook
"""
