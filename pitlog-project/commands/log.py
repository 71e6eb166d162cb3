# The command: pitlog log [<revision> | <old>..<new>] [-p <path>] [-s <cursor>] [-n <limit>]
# What it does: Shows one page of commit history, newest first, with links to the next and previous pages
# How it does: `log_detail` handles a single request: it configures a revision walk (start, optional range boundary, optional path), reads the `s` cursor, lets a Paginator pull one page out of the walk, and decorates each commit with the branches and tags pointing at it. It answers with an HTTP-like status and a data dict, so the same code can sit behind a web front end; `run` renders that dict as text
# What data structure it uses: Graph Traversal over the commit DAG (via utils/revwalk), Bounded Deque (via utils/paginator), Map / Dictionary (object id -> refs, and the page data handed to the renderer)

import logging
import sys
from datetime import datetime, timezone
from http import HTTPStatus

from utils import config as config_utils, objects, repository, revwalk, tags as tag_utils
from utils.errors import STORE_ERRORS, IncorrectObjectTypeError, MissingObjectError, NotFoundError, WalkError
from utils.paginator import Paginator
from utils.view import LogView, parse_revision_range

log = logging.getLogger(__name__)

START_PARAM = 's'
ABBREV_LENGTH = 7


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a pit repository", file=sys.stderr)
        sys.exit(1)

    try:
        log_config = config_utils.get_log_config(repo_root)
    except ValueError as e:
        print(f"fatal: bad config: {e}", file=sys.stderr)
        sys.exit(1)
    limit = log_config['limit'] if args.limit is None else args.limit

    try:
        old_revision, revision = parse_revision_range(repo_root, args.revision)
    except NotFoundError:
        print(f"fatal: ambiguous argument '{args.revision}': unknown revision", file=sys.stderr)
        sys.exit(1)

    params = {START_PARAM: args.start} if args.start else {}
    view = LogView(revision, old_revision, args.path or '', params)

    status, data = log_detail(repo_root, view, limit, log_config['rename_threshold'])
    if status == HTTPStatus.NOT_FOUND:
        print(f"fatal: {view.to_url()}: not found", file=sys.stderr)
        sys.exit(1)
    if status != HTTPStatus.OK:
        print("fatal: error reading history", file=sys.stderr)
        sys.exit(128)

    print_log(data)

def log_detail(repo_root, view, limit=config_utils.DEFAULT_LOG_LIMIT,
               rename_threshold=config_utils.DEFAULT_RENAME_THRESHOLD):
    """
    Builds one log page for `view`.

    Returns (status, data). data is None unless status is OK. Bad request
    input (an unknown or non-commit revision, a cursor that is absent,
    ambiguous, repeated or outside the history) yields NOT_FOUND; a store
    failure (during the walk, or while reading tags and refs) is logged and
    yields INTERNAL_SERVER_ERROR and no partial page.
    """
    if limit < 0:
        raise ValueError(f"limit must be positive: {limit}")

    boundary = view.old_revision.peeled_id if view.old_revision is not None else None
    walk = None
    try:
        try:
            walk = revwalk.new_walk(repo_root, view.revision.peeled_id, boundary, view.path, rename_threshold)
        except (IncorrectObjectTypeError, MissingObjectError):
            return HTTPStatus.NOT_FOUND, None

        try:
            start = get_start(repo_root, view.params)
        except NotFoundError:
            return HTTPStatus.NOT_FOUND, None

        data = {}

        if not view.revision.name_is_id:
            tags = [tag_data(t) for t in tag_utils.collect_tags(repo_root, view.revision.id, boundary)]
            if tags:
                data['tags'] = tags

        paginator = Paginator(walk, limit, start)
        refs_by_id = repository.all_refs_by_peeled_target(repo_root)
        entries = [commit_data(c, refs_by_id) for c in paginator]

        data['title'] = view.title()
        data['entries'] = entries

        if paginator.next_start is not None:
            data['next_url'] = view.copy_and_canonicalize().replace_param(
                START_PARAM, paginator.next_start).to_url()

        if paginator.previous_start is not None:
            prev_view = view.copy_and_canonicalize()
            if prev_view.revision.peeled_id != paginator.previous_start:
                prev_view = prev_view.replace_param(START_PARAM, paginator.previous_start)
            else:
                prev_view = prev_view.remove_param(START_PARAM)
            data['previous_url'] = prev_view.to_url()

        return HTTPStatus.OK, data
    except NotFoundError:
        return HTTPStatus.NOT_FOUND, None
    except WalkError:
        log.warning("Error in rev walk", exc_info=True)
        return HTTPStatus.INTERNAL_SERVER_ERROR, None
    except STORE_ERRORS:
        # tags, refs or a corrupt start commit, read outside the walk itself
        log.warning("Error reading object store", exc_info=True)
        return HTTPStatus.INTERNAL_SERVER_ERROR, None
    finally:
        if walk is not None:
            walk.release()

def get_start(repo_root, params): # Returns the full id named by the cursor parameter, or None for the first page
    values = params.get(START_PARAM, [])
    if len(values) == 0:
        return None
    if len(values) > 1:
        raise NotFoundError(f"more than one {START_PARAM} parameter")
    ids = objects.resolve(repo_root, values[0])
    if len(ids) != 1:
        raise NotFoundError(f"{values[0]!r} does not name exactly one object")
    return next(iter(ids))

def ident_data(ident):
    if ident is None:
        return None
    when = datetime.fromtimestamp(ident.time, tz=timezone.utc)
    return {'name': ident.name, 'email': ident.email, 'time': when.isoformat()}

def commit_data(commit, refs_by_id): # Shortlog fields for one commit
    refs = refs_by_id.get(commit.id, set())
    return {
        'sha': commit.id,
        'abbrev_sha': commit.id[:ABBREV_LENGTH],
        'url': f"/+/{commit.id}",
        'author': ident_data(commit.author),
        'short_message': commit.short_message,
        'branches': sorted(repository.short_ref_name(r) for r in refs if r.startswith('refs/heads/')),
        'tags': sorted(repository.short_ref_name(r) for r in refs if r.startswith('refs/tags/')),
    }

def tag_data(tag):
    return {
        'sha': tag.id,
        'name': tag.name,
        'object': tag.object,
        'type': tag.type,
        'tagger': ident_data(tag.tagger),
        'message': tag.message.strip(),
    }

def print_log(data):
    print(data['title'])
    print()

    for tag in data.get('tags', []):
        print(f"tag {tag['name']}")
        if tag['tagger']:
            print(f"Tagger: {tag['tagger']['name']} <{tag['tagger']['email']}>")
        print()
        print(f"    {tag['message']}")
        print()

    for entry in data['entries']:
        decorations = list(entry['branches'])
        decorations += [f"tag: {t}" for t in entry['tags']]
        suffix = f" ({', '.join(decorations)})" if decorations else ''
        print(f"commit {entry['sha']}{suffix}")
        if entry['author']:
            print(f"Author: {entry['author']['name']} <{entry['author']['email']}>")
            print(f"Date:   {entry['author']['time']}")
        print()
        print(f"    {entry['short_message']}")
        print()

    if 'previous_url' in data:
        print(f"Previous: {data['previous_url']}")
    if 'next_url' in data:
        print(f"Next: {data['next_url']}")
