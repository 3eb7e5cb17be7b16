"""Checkout command - restore files or switch branches."""

from dataclasses import dataclass
from typing import Optional, Sequence, Union

import click

from sprig.cli.output import success
from sprig.cli.session import INCORRECT_OPERANDS, repository_session
from sprig.core.errors import UserError

SEPARATOR = '--'
# click consumes a bare '--', so it is swapped for this token before parsing
_SEPARATOR_TOKEN = '\0--'


@dataclass(frozen=True)
class CheckoutBranch:
    """``checkout <branch>``"""
    name: str


@dataclass(frozen=True)
class CheckoutFile:
    """``checkout -- <file>`` or ``checkout <commit> -- <file>``"""
    commit: Optional[str]
    name: str


CheckoutTarget = Union[CheckoutBranch, CheckoutFile]


def parse_operands(operands: Sequence[str]) -> CheckoutTarget:
    """
    Classify checkout operands.

    Raises:
        UserError: If the operands match none of the checkout forms
    """
    operands = [SEPARATOR if op == _SEPARATOR_TOKEN else op for op in operands]

    if len(operands) == 1 and operands[0] != SEPARATOR:
        return CheckoutBranch(operands[0])
    if len(operands) == 2 and operands[0] == SEPARATOR:
        return CheckoutFile(None, operands[1])
    if len(operands) == 3 and operands[1] == SEPARATOR and operands[0] != SEPARATOR:
        return CheckoutFile(operands[0], operands[2])
    raise UserError(INCORRECT_OPERANDS)


class OperandCommand(click.Command):
    """Command that keeps a literal ``--`` among its operands."""

    def parse_args(self, ctx, args):
        args = [_SEPARATOR_TOKEN if arg == SEPARATOR else arg for arg in args]
        return super().parse_args(ctx, args)


@click.command('checkout', cls=OperandCommand)
@click.argument('operands', nargs=-1)
def checkout_cmd(operands):
    """
    Restore a file or switch branches.

    Examples:
        sprig checkout -- notes.txt          # Restore from the current commit
        sprig checkout a1b2c3 -- notes.txt   # Restore from another commit
        sprig checkout feature               # Switch to a branch
    """
    with repository_session() as repo:
        target = parse_operands(operands)

        if isinstance(target, CheckoutBranch):
            repo.checkout.checkout_branch(target.name)
            click.echo(success(f"Switched to branch '{target.name}'"))
        else:
            repo.checkout.checkout_file(target.commit, target.name)
