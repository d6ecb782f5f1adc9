from urlshortener.confirmation.gate import ConfirmationGate, generate_token


__all__ = [
    'ConfirmationGate',
    'generate_token',
]
