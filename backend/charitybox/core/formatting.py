def format_rupiah(amount: int) -> str:
    # id-ID groups thousands with dots
    return "Rp " + f"{amount:,}".replace(",", ".")


def format_count(count: int, suffix: str = "") -> str:
    text = f"{count} donasi"
    return f"{text} {suffix}" if suffix else text
