"""
Ports (Interfaces) do Domínio de Auditoria.
"""

from typing import Iterable, List, Optional, Protocol, runtime_checkable

from .entities import PerguntaAuditoria, TipoChamada, TODOS_OS_TIPOS


@runtime_checkable
class PerguntaAuditoriaRepository(Protocol):
    """
    Catálogo de perguntas configurado externamente.

    Implementações:
    - DjangoPerguntaAuditoriaRepository (ORM, editável no admin)
    - InMemoryPerguntaAuditoriaRepository (testes e catálogo padrão)
    """

    def list_by_tipo_chamada(
        self,
        tipo: Optional[TipoChamada],
    ) -> List[PerguntaAuditoria]:
        """
        Lista perguntas aplicáveis ao tipo, ordenadas por ordem.

        Args:
            tipo: Tipo de chamada; None retorna só as perguntas "ALL"
        """
        ...


class InMemoryPerguntaAuditoriaRepository:
    """Catálogo em memória."""

    def __init__(self, perguntas: Iterable[PerguntaAuditoria] = ()):
        self._perguntas: List[PerguntaAuditoria] = list(perguntas)

    def add(self, pergunta: PerguntaAuditoria) -> None:
        self._perguntas.append(pergunta)

    def list_by_tipo_chamada(
        self,
        tipo: Optional[TipoChamada],
    ) -> List[PerguntaAuditoria]:
        return sorted(
            (p for p in self._perguntas if p.aplica_a(tipo)),
            key=lambda p: (p.ordem, p.id),
        )


def _tipos(*tipos: TipoChamada) -> frozenset:
    return frozenset(t.value for t in tipos)


# Catálogo usado no seed de desenvolvimento e nos testes.
CATALOGO_PADRAO = (
    PerguntaAuditoria(
        id="pv1",
        texto="Atendimento durante a compra",
        opcoes=("Ótimo", "Ok", "Precisa melhorar"),
        tipos=_tipos(TipoChamada.POS_VENDA),
        ordem=1,
        etapa="atendimento",
    ),
    PerguntaAuditoria(
        id="pv2",
        texto="Segurança no dimensionamento/indicação",
        opcoes=("Sim", "Parcial", "Não"),
        tipos=_tipos(TipoChamada.POS_VENDA),
        ordem=2,
        etapa="tecnico",
    ),
    PerguntaAuditoria(
        id="pv3",
        texto="Interesse em novo equipamento (oportunidade de upsell)",
        opcoes=("Sim", "Não"),
        tipos=_tipos(TipoChamada.POS_VENDA, TipoChamada.ASSISTENCIA),
        ordem=3,
        sensivel_upsell=True,
        etapa="atendimento",
    ),
    PerguntaAuditoria(
        id="pr1",
        texto="Perfil de consumo",
        opcoes=("Alto", "Médio", "Baixo"),
        tipos=_tipos(TipoChamada.PROSPECCAO),
        ordem=1,
        etapa="atendimento",
    ),
    PerguntaAuditoria(
        id="pr2",
        texto="Aceitou receber proposta comercial (upsell)",
        opcoes=("Sim", "Não"),
        tipos=_tipos(TipoChamada.PROSPECCAO, TipoChamada.VENDA),
        ordem=2,
        sensivel_upsell=True,
        etapa="financeiro",
    ),
    PerguntaAuditoria(
        id="vd1",
        texto="Entrega dentro do prazo",
        opcoes=("No prazo", "Atrasado"),
        tipos=_tipos(TipoChamada.VENDA),
        ordem=1,
        etapa="logistica",
    ),
    PerguntaAuditoria(
        id="as1",
        texto="Problema resolvido no contato",
        opcoes=("Sim", "Parcial", "Não"),
        tipos=_tipos(TipoChamada.ASSISTENCIA, TipoChamada.CONFIRMACAO_PROTOCOLO),
        ordem=1,
        etapa="tecnico",
    ),
    PerguntaAuditoria(
        id="fc1",
        texto="Satisfação",
        opcoes=("Boa", "Regular", "Ruim"),
        tipos=frozenset({TODOS_OS_TIPOS}),
        ordem=1,
        confirmacao_fechamento=True,
    ),
    PerguntaAuditoria(
        id="fc2",
        texto="Retornou Compra",
        opcoes=("Sim", "Não"),
        tipos=frozenset({TODOS_OS_TIPOS}),
        ordem=2,
        confirmacao_fechamento=True,
    ),
)
