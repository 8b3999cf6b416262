import logging

from config import get_settings
from deck_service import DeckService
from models import DeckRequest, DeckResult

logging.basicConfig(level=logging.INFO)


def menu():
    print("\n=== Clash Deck Proxy (Menu) ===")
    print("1) Gerar deck para um player (TAG)")
    print("2) Completar deck parcial")
    print("0) Sair")
    return input("Opção: ").strip()


def print_result(result: DeckResult):
    if not result.valid:
        print(f"❌ {result.message}")
        return
    print(f"\nEstratégia: {result.strategy}")
    for c in result.deck:
        extra = " (evo)" if c.evolved else ""
        extra += " (hero)" if c.is_hero else ""
        print(f"- {c.name}{extra}")
    print(f"Média de Elixir: {result.average_elixir}")
    print(f"Tática: {result.tactic}")
    print(f"Link: {result.share_link}")
    if result.missing_forced:
        print(f"Aviso: cartas escolhidas que ficaram fora: {', '.join(result.missing_forced)}")


def gerar_deck(service: DeckService):
    tag = input("Player TAG (ex: #ABCD123): ").strip().upper()
    if not tag:
        print("TAG inválida."); return
    print_result(service.generate_free_deck(tag))


def completar_deck(service: DeckService):
    tag = input("Player TAG (ex: #ABCD123): ").strip().upper()
    ids = input("IDs das cartas já escolhidas (separados por vírgula): ").strip()
    style = input("Estilo de jogo (ex: Cycle): ").strip()
    try:
        partial = [int(i) for i in ids.split(",") if i.strip()]
    except ValueError:
        print("❌ IDs devem ser números inteiros."); return
    try:
        req = DeckRequest.from_json({
            "playerTag": tag,
            "partialDeck": partial,
            "playStyle": style,
        })
    except ValueError as e:
        print("❌", e); return
    print_result(service.complete_deck(req))


def main():
    service = DeckService.from_settings(get_settings())
    while True:
        op = menu()
        if op == "1": gerar_deck(service)
        elif op == "2": completar_deck(service)
        elif op == "0": break
        else: print("Opção inválida.")


if __name__ == "__main__":
    main()
