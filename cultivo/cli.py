import logging
import os
import sys
from typing import List
from google import genai
from dotenv import load_dotenv

# Load environment variables from .env before the constants are read.
load_dotenv()
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.markdown import Markdown
from rich.table import Table
from rich.text import Text
from prompt_toolkit import prompt
from prompt_toolkit.styles import Style
from prompt_toolkit.key_binding import KeyBindings
from cultivo.const import LOG_LEVEL
from cultivo.core import Cultivo
from cultivo.models import ChatMessage, ConceptNode, MessageRole

console = Console()

ROLE_STYLES = {
    MessageRole.SYSTEM: ('SISTEMA', 'blue'),
    MessageRole.INFERENCE: ('INFERÊNCIA', 'cyan'),
    MessageRole.QUESTION: ('PERGUNTA', 'yellow'),
    MessageRole.ALERT: ('ALERTA', 'red'),
    MessageRole.ASSISTANT: ('CULTIVO', 'magenta'),
    MessageRole.USER: ('VOCÊ', 'green'),
}

HELP_TEXT = """Comandos:
  /kb               lista conceitos ativos e esmaecendo
  /reinforce <id>   reforça um conceito
  /export           exporta o grafo em GEXF
  /reset            apaga toda a base de conhecimento
  exit | quit       salva e encerra"""


def setup_logging() -> None:
    logging.basicConfig(level=LOG_LEVEL, format='%(message)s', datefmt='[%X]', handlers=[RichHandler(markup=True, rich_tracebacks=True)])


def render_message(message: ChatMessage) -> None:
    title, color = ROLE_STYLES.get(message.role, ('SISTEMA', 'blue'))
    if message.role == MessageRole.ASSISTANT:
        console.print(Panel(Markdown(message.content), title=f'[bold {color}]{title}[/bold {color}]', border_style=color))
    else:
        console.print(f'[bold {color}][{title}][/bold {color}] {escape(message.content)}', highlight=False)


def render_sidebar(active: List[ConceptNode], fading: List[ConceptNode]) -> None:
    table = Table(title=f'{len(active)} ativos, {len(fading)} esmaecendo')
    table.add_column('id', style='dim')
    table.add_column('label', style='bold')
    table.add_column('f', justify='right')
    table.add_column('c', justify='right')
    table.add_column('energia', justify='right')
    table.add_column('estado')
    for node in active + fading:
        table.add_row(node.id, escape(node.label), f'{node.frequency:.2f}', f'{node.confidence:.2f}', f'{node.energy:.2f}', node.state)
    console.print(table)


def build_engine() -> Cultivo:
    client = None
    api_key = os.environ.get('GEMINI_API_KEY')
    if api_key:
        client = genai.Client(api_key=api_key)
    else:
        console.print('[bold yellow]GEMINI_API_KEY not set:[/bold yellow] replies fall back to raw facts.')
    return Cultivo(llm_client=client)


def handle_command(engine, command: str) -> None:
    name, _, argument = command.partition(' ')
    if name == '/kb':
        render_sidebar(*engine.sidebar())
    elif name == '/reinforce':
        render_message(engine.reinforce(argument.strip()))
    elif name == '/export':
        console.print(f'[bold blue][EXPORT][/bold blue] {engine.export_graph()}')
    elif name == '/reset':
        render_message(engine.reset())
    else:
        console.print(HELP_TEXT)


def main() -> None:
    setup_logging()
    try:
        with console.status('[bold blue]Loading embedding model and knowledge base...', spinner='runner'):
            engine = build_engine()
    except Exception as e:
        console.print(f'[bold red][ERROR][/bold red] Initialization failed: {e}')
        sys.exit(1)

    console.print(Panel(Text('CULTIVO ATIVO', justify='center', style='bold yellow'), border_style='yellow'))
    console.print("Type [bold cyan]'exit'[/bold cyan] to save and quit, [bold cyan]/help[/bold cyan] for commands.\n")
    console.print('[dim]Multi-line active: Enter to send, Alt+Enter (or Esc+Enter) for newline.[/dim]\n')

    prompt_style = Style.from_dict({'prompt': 'ansigreen bold'})
    kb = KeyBindings()

    @kb.add('enter')
    def _(event):
        """Submit the input on Enter."""
        event.current_buffer.validate_and_handle()

    @kb.add('escape', 'enter')
    def _(event):
        """Insert a newline on Alt+Enter (Escape+Enter)."""
        event.current_buffer.insert_text('\n')

    try:
        while True:
            try:
                user_input = prompt([('class:prompt', '> ')], style=prompt_style, key_bindings=kb, multiline=True)
            except EOFError:
                user_input = 'exit'
            except KeyboardInterrupt:
                console.print('\n[bold yellow]Interrupt received. Saving...[/bold yellow]')
                user_input = 'exit'

            if user_input.strip().lower() in ['exit', 'quit']:
                break
            if not user_input.strip():
                continue
            if user_input.startswith('/'):
                handle_command(engine, user_input.strip())
                continue

            with console.status('[bold blue]Cultivating...', spinner='dots'):
                messages = engine.process_message(user_input)
            for message in messages:
                render_message(message)
    finally:
        console.print('\n[bold blue][CULTIVO][/bold blue] Saving knowledge base...', style='italic')
        engine.save()


if __name__ == '__main__':
    main()
