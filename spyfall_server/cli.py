"""
Pass-and-Play CLI

Runs an offline Spyfall round on a single terminal. This module owns the
offline phases: setup, role reveal, discussion, voting and results.
"""

import click

from .models.game import OfflineVote, OFFLINE_SPY_WINS
from .services.offline_spyfall import (
    apply_spy_guess, assign_roles, create_voting_order, process_votes, validate_player_names
)


def _prompt_player_names():
    names = []
    while True:
        name = click.prompt(f'Player {len(names) + 1} name (blank to finish)', default='', show_default=False)
        if not name.strip():
            return names
        names.append(name.strip())


def _reveal_roles(roles):
    for role in roles:
        click.clear()
        click.pause(f'Pass the device to {role.player_name} and press any key...')
        if role.is_spy:
            click.secho('You are the SPY. Figure out the location!', fg='red', bold=True)
        else:
            click.secho(f'Location: {role.location}', fg='green', bold=True)
            click.echo(f'Your role: {role.role}')
        click.pause('Memorize it, then press any key to hide...')
    click.clear()


def _collect_votes(player_names):
    votes = []
    for voter in create_voting_order(player_names):
        candidates = [name for name in player_names if name != voter]
        target = click.prompt(
            f'{voter}, who is the spy?',
            type=click.Choice(candidates, case_sensitive=False)
        )
        votes.append(OfflineVote(voter_name=voter, target_name=target))
    return votes


def _show_results(results):
    click.echo('')
    click.echo('Votes:')
    for name, count in results.vote_counts.items():
        click.echo(f'  {name}: {count}')

    if results.is_tie:
        click.echo('The vote ended in a tie. Nobody was voted out.')
    else:
        click.echo(f'Voted out: {results.voted_out_player}')

    click.echo(f'The spy was {results.spy_name}. The location was {results.location}.')
    if results.location_guess is not None:
        verdict = 'correct' if results.spy_guessed_correctly else 'wrong'
        click.echo(f'The spy guessed "{results.location_guess}" ({verdict}).')

    if results.winner == OFFLINE_SPY_WINS:
        click.secho('Spy wins!', fg='red', bold=True)
    else:
        click.secho('Non-spies win!', fg='green', bold=True)

    click.echo('Roles:')
    for role in results.roles:
        label = 'Spy' if role.is_spy else f'{role.role} ({role.location})'
        click.echo(f'  {role.player_name}: {label}')


def play_round(player_names):
    """Run one offline round and return its results."""
    roles = assign_roles(player_names)
    _reveal_roles(roles)

    click.pause('Discuss and ask questions. Press any key when ready to vote...')

    results = process_votes(_collect_votes(player_names), roles)

    if not results.is_tie and results.voted_out_player == results.spy_name:
        guess = click.prompt(
            f'{results.spy_name}, you were caught! Guess the location (blank to skip)',
            default='', show_default=False
        )
        if guess.strip():
            results = apply_spy_guess(results, guess)

    _show_results(results)
    return results


@click.command('offline-game')
@click.option('--player', '-p', 'players', multiple=True, help='Player name; repeat for each player.')
def offline_game(players):
    """Play Spyfall offline, passing one device around."""
    player_names = [name.strip() for name in players] or _prompt_player_names()

    validation = validate_player_names(player_names)
    if not validation['is_valid']:
        for error in validation['errors']:
            click.secho(error, fg='red', err=True)
        click.get_current_context().exit(1)

    while True:
        play_round(player_names)
        if not click.confirm('Play again with the same players?', default=False):
            break


if __name__ == '__main__':
    offline_game()
